"""did:jwk resolution.

The method-specific identifier is the base64url encoding of a public JWK, so
the document is derived from the DID itself with no I/O. A did:jwk cannot be
deactivated.

The JWK ``use`` member picks the verification relationships: ``sig`` keys are
for authentication, assertion and capabilities, ``enc`` keys for key agreement
only, and keys without ``use`` for all of them. X25519 and X448 keys are
always key agreement keys.
"""

from jwcrypto import jwk
from jwcrypto.common import JWException, base64url_decode, json_decode

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.model import (
    Document,
    ErrorKind,
    ResolutionResult,
    VerificationMethod,
)
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext

W3C_DID_CONTEXT = "https://www.w3.org/ns/did/v1"
JWS_2020_CONTEXT = "https://w3id.org/security/suites/jws-2020/v1"
JSON_WEB_KEY_2020 = "JsonWebKey2020"

KEY_AGREEMENT_CURVES = ("X25519", "X448")


def decode_did_jwk(identifier: str) -> dict:
    """Decode and validate the public JWK carried in a did:jwk identifier.

    Raises:
        ValueError: the identifier is not a base64url encoded public JWK
    """
    try:
        params = json_decode(base64url_decode(identifier))
    except ValueError as e:
        raise ValueError(f"identifier is not base64url encoded JSON: {e}") from e
    if not isinstance(params, dict):
        raise ValueError("identifier does not encode a JSON object")

    try:
        key = jwk.JWK(**params)
    except (JWException, TypeError, ValueError) as e:
        raise ValueError(f"invalid JWK: {e}") from e
    if key.has_private:
        raise ValueError("JWK contains private key material")
    return params


class JwkDidResolver(MethodResolver):
    supported_methods = frozenset({"jwk"})

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        try:
            public_jwk = decode_did_jwk(parsed.id)
        except ValueError as e:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did, f"Unable to resolve did '{did}': {e}"
            )

        verification_method_id = f"{did}#0"
        use = public_jwk.get("use")
        if public_jwk.get("crv") in KEY_AGREEMENT_CURVES:
            use = "enc"

        document = Document(id=did, context=[W3C_DID_CONTEXT, JWS_2020_CONTEXT])
        document.verification_method.append(
            VerificationMethod(
                id=verification_method_id,
                type=JSON_WEB_KEY_2020,
                controller=did,
                public_key_jwk=public_jwk,
            )
        )
        if use != "enc":
            document.authentication.append(verification_method_id)
            document.assertion_method.append(verification_method_id)
            document.capability_invocation = [verification_method_id]
            document.capability_delegation = [verification_method_id]
        if use != "sig":
            document.key_agreement.append(verification_method_id)
        return ResolutionResult.from_document(document)
