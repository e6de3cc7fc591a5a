"""
Ledger verkey conventions.

A NYM record's verkey is either a full base58 Ed25519 key (43 or 44
characters) or an abbreviated ``~``-prefixed suffix. The full key of an
abbreviated verkey is the DID's own 16-byte identifier followed by the 16
decoded suffix bytes.

Deactivation on the ledger is signalled by rotating the verkey to a publicly
known "dead" key that nobody can hold the private half of: the 32-byte value
``00..00dead``.
"""

import re

from social.graze.didroute.keys import b58_to_bytes, bytes_to_b58


FULL_VERKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{43,44}$")

DEAD_KEY_BYTES = bytes.fromhex(
    "000000000000000000000000000000000000000000000000000000000000dead"
)
DEAD_VERKEY = bytes_to_b58(DEAD_KEY_BYTES)


def is_full_verkey(verkey: str) -> bool:
    return FULL_VERKEY_PATTERN.match(verkey) is not None


def full_verkey(did: str, verkey: str) -> str:
    """Expand an abbreviated verkey using the DID identifier.

    Args:
        did: Qualified or unqualified DID; only the last segment is used
        verkey: Full or ``~``-abbreviated base58 verkey

    Returns:
        Base58 full verkey
    """
    if is_full_verkey(verkey):
        return verkey

    identifier = did.split(":")[-1]
    return bytes_to_b58(b58_to_bytes(identifier) + b58_to_bytes(verkey.removeprefix("~")))


def is_deactivated_verkey(did: str, verkey: str) -> bool:
    """Check whether a DID's verkey is the dead key.

    An abbreviated verkey is expanded with the DID identifier before the
    comparison, so only a full key equal to the sentinel matches. Full verkeys
    are compared on decoded bytes, so any base58 rendering of the sentinel
    matches.
    """
    try:
        if verkey.startswith("~"):
            key_bytes = b58_to_bytes(did.split(":")[-1]) + b58_to_bytes(verkey[1:])
        else:
            key_bytes = b58_to_bytes(verkey).rjust(len(DEAD_KEY_BYTES), b"\x00")
    except ValueError:
        return False
    return key_bytes == DEAD_KEY_BYTES
