"""did:key resolution.

The document is derived from the DID itself, so resolution performs no I/O.
Only Ed25519 multikeys are supported. A did:key cannot be deactivated.
"""

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.keys import (
    ED25519_2018_CONTEXT,
    ED25519_VERIFICATION_KEY_2018,
    X25519_2019_CONTEXT,
    X25519_KEY_AGREEMENT_KEY_2019,
    bytes_to_b58,
    ed25519_to_x25519,
    multikey_from_public_key,
    public_key_from_multikey,
)
from social.graze.didroute.model import (
    Document,
    ErrorKind,
    ResolutionResult,
    VerificationMethod,
)
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext


class KeyDidResolver(MethodResolver):
    supported_methods = frozenset({"key"})

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        try:
            codec, public_key = public_key_from_multikey(parsed.id)
            if codec != "ed25519-pub":
                raise ValueError(f"unsupported key type {codec}")
            x25519_key = ed25519_to_x25519(public_key)
        except (KeyError, ValueError) as e:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did, f"Unable to resolve did '{did}': {e}"
            )

        verification_method_id = f"{did}#{parsed.id}"
        key_agreement_id = f"{did}#{multikey_from_public_key(x25519_key, 'x25519-pub')}"

        document = Document(id=did)
        document.add_context(ED25519_2018_CONTEXT)
        document.add_context(X25519_2019_CONTEXT)
        document.verification_method.extend(
            [
                VerificationMethod(
                    id=verification_method_id,
                    type=ED25519_VERIFICATION_KEY_2018,
                    controller=did,
                    public_key_base58=bytes_to_b58(public_key),
                ),
                VerificationMethod(
                    id=key_agreement_id,
                    type=X25519_KEY_AGREEMENT_KEY_2019,
                    controller=did,
                    public_key_base58=bytes_to_b58(x25519_key),
                ),
            ]
        )
        document.authentication.append(verification_method_id)
        document.assertion_method.append(verification_method_id)
        document.key_agreement.append(key_agreement_id)
        return ResolutionResult.from_document(document)
