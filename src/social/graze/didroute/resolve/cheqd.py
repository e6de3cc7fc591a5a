"""did:cheqd resolution through a DID resolver HTTP endpoint.

The cheqd network is queried through a resolver service speaking the
``/1.0/identifiers/{did}`` interface, which returns a full resolution result.
Deactivation is native to the ledger: the resolver reports it in
``didDocumentMetadata.deactivated`` and it is carried over unchanged.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.model import Document, ErrorKind, ResolutionResult
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext

logger = logging.getLogger(__name__)

DID_RESOLUTION_ACCEPT = 'application/ld+json;profile="https://w3id.org/did-resolution"'


class CheqdDidResolver(MethodResolver):
    """Resolver for ``did:cheqd`` DIDs.

    Args:
        resolver_url: Base URL of the cheqd DID resolver service
    """

    supported_methods = frozenset({"cheqd"})

    def __init__(self, resolver_url: str = "https://resolver.cheqd.net"):
        self.resolver_url = resolver_url.rstrip("/")

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        url = f"{self.resolver_url}/1.0/identifiers/{did}"
        async with context.session.get(
            url, headers={"Accept": DID_RESOLUTION_ACCEPT}
        ) as resp:
            if resp.status == 404:
                return ResolutionResult.from_error(
                    ErrorKind.not_found, f"DID '{did}' not found on cheqd"
                )
            # Some resolvers answer deactivated DIDs with 410 and a full body.
            if resp.status not in (200, 410):
                return ResolutionResult.from_error(
                    ErrorKind.not_found,
                    f"Unable to resolve did '{did}': resolver returned status {resp.status}",
                )
            body = await resp.json(content_type=None)

        if not isinstance(body, dict):
            return ResolutionResult.from_error(
                ErrorKind.not_found, f"Empty response for '{did}' from {self.resolver_url}"
            )

        resolution_metadata: Dict[str, Any] = body.get("didResolutionMetadata") or {}
        document_body = body.get("didDocument")
        if document_body is None:
            message = resolution_metadata.get("message") or resolution_metadata.get(
                "error", "no document returned"
            )
            return ResolutionResult.from_error(
                ErrorKind.not_found, f"Unable to resolve did '{did}': {message}"
            )

        try:
            document = Document.model_validate(document_body)
        except ValidationError as e:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did_document, f"Invalid DID document for '{did}': {e}"
            )
        if document.id != did:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did_document,
                f"DID document id '{document.id}' does not match '{did}'",
            )

        document_metadata = body.get("didDocumentMetadata") or {}
        deactivated = document_metadata.get("deactivated") is True
        if deactivated:
            logger.debug("DID %s is deactivated on cheqd", did)
        return ResolutionResult.from_document(document, deactivated=deactivated)
