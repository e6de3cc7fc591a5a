"""did:web resolution.

Fetches the hosted ``did.json`` for a did:web DID. The hosting transport has
no deactivation primitive, so deactivation is read from a ``deactivated``
member embedded in the served document (see ``EmbeddedFlagDeactivation``).
"""

import json
import logging
from typing import Optional
from urllib.parse import unquote

from pydantic import ValidationError

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.model import Document, ErrorKind, ResolutionResult
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext
from social.graze.didroute.resolve.deactivation import EmbeddedFlagDeactivation

logger = logging.getLogger(__name__)


def did_web_url(did: str, scheme: str = "https") -> Optional[str]:
    """Construct the did.json URL for a did:web DID.

    ``did:web:example.com`` maps to ``https://example.com/.well-known/did.json``
    and ``did:web:example.com:user:alice`` to
    ``https://example.com/user/alice/did.json``. A percent-encoded port in the
    host segment is decoded.
    """
    parts = [unquote(part) for part in did.removeprefix("did:web:").split(":")]
    if len(parts) == 0 or len(parts[0]) == 0:
        return None

    if len(parts) == 1:
        parts.append(".well-known")

    return "{scheme}://{inner}/did.json".format(scheme=scheme, inner="/".join(parts))


class WebDidResolver(MethodResolver):
    """Resolver for ``did:web`` DIDs.

    Args:
        scheme: URL scheme for document fetches, ``http`` only for local testing
    """

    supported_methods = frozenset({"web"})
    deactivation = EmbeddedFlagDeactivation("deactivated")

    def __init__(self, scheme: str = "https"):
        self.scheme = scheme

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        url = did_web_url(did, self.scheme)
        if url is None:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did, f"Unable to build did:web URL for '{did}'"
            )

        async with context.session.get(url) as resp:
            if resp.status == 404:
                return ResolutionResult.from_error(
                    ErrorKind.not_found, f"DID document for '{did}' not found at {url}"
                )
            if resp.status != 200:
                return ResolutionResult.from_error(
                    ErrorKind.not_found,
                    f"Fetching DID document for '{did}' from {url} returned status {resp.status}",
                )
            body = await resp.text()

        try:
            document = Document.model_validate(json.loads(body))
        except (ValueError, ValidationError) as e:
            logger.warning("Invalid DID document for %s at %s: %s", did, url, e)
            return ResolutionResult.from_error(
                ErrorKind.invalid_did_document,
                f"Invalid DID document for '{did}' at {url}: {e}",
            )

        if document.id != did:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did_document,
                f"DID document id '{document.id}' does not match '{did}'",
            )

        return ResolutionResult.from_document(document)
