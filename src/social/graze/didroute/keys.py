"""Key encoding helpers shared by the key-derived and ledger resolvers."""

import base58
from multiformats import multibase, multicodec
from nacl.bindings import crypto_sign_ed25519_pk_to_curve25519


ED25519_2018_CONTEXT = "https://w3id.org/security/suites/ed25519-2018/v1"
X25519_2019_CONTEXT = "https://w3id.org/security/suites/x25519-2019/v1"

ED25519_VERIFICATION_KEY_2018 = "Ed25519VerificationKey2018"
X25519_KEY_AGREEMENT_KEY_2019 = "X25519KeyAgreementKey2019"


def b58_to_bytes(value: str) -> bytes:
    return base58.b58decode(value)


def bytes_to_b58(value: bytes) -> str:
    return base58.b58encode(value).decode("ascii")


def ed25519_to_x25519(public_key: bytes) -> bytes:
    """Convert an Ed25519 public key to its X25519 (Curve25519) counterpart.

    Raises:
        ValueError: if the key is not a valid Ed25519 point
    """
    if len(public_key) != 32:
        raise ValueError(f"Ed25519 public key must be 32 bytes, got {len(public_key)}")
    try:
        return crypto_sign_ed25519_pk_to_curve25519(public_key)
    except Exception as e:
        raise ValueError(f"Unable to convert Ed25519 key to X25519: {e}") from e


def ed25519_b58_to_x25519_b58(public_key_base58: str) -> str:
    return bytes_to_b58(ed25519_to_x25519(b58_to_bytes(public_key_base58)))


def multikey_from_public_key(public_key: bytes, key_type: str) -> str:
    """Encode a raw public key as a base58btc multikey (``z6Mk...`` for Ed25519)."""
    return multibase.encode(multicodec.wrap(key_type, public_key), "base58btc")


def public_key_from_multikey(multikey: str):
    """Decode a multikey into its codec name and raw key bytes."""
    codec, raw = multicodec.unwrap(multibase.decode(multikey))
    return codec.name, raw
