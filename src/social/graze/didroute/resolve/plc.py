"""did:plc resolution against a PLC directory."""

import logging

from pydantic import ValidationError

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.model import Document, ErrorKind, ResolutionResult
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext

logger = logging.getLogger(__name__)


class PlcDidResolver(MethodResolver):
    """Resolver for ``did:plc`` DIDs.

    The directory answers ``410 Gone`` for tombstoned DIDs, which is reported
    as a deactivated document without successors.

    Args:
        plc_hostname: PLC directory hostname
    """

    supported_methods = frozenset({"plc"})

    def __init__(self, plc_hostname: str = "plc.directory"):
        self.plc_hostname = plc_hostname

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        async with context.session.get(f"https://{self.plc_hostname}/{did}") as resp:
            if resp.status == 410:
                logger.debug("DID %s is tombstoned in %s", did, self.plc_hostname)
                return ResolutionResult.from_document(Document(id=did), deactivated=True)
            if resp.status != 200:
                return ResolutionResult.from_error(
                    ErrorKind.not_found,
                    f"DID '{did}' not found in {self.plc_hostname} (status {resp.status})",
                )
            body = await resp.json()

        if body is None:
            return ResolutionResult.from_error(
                ErrorKind.not_found, f"Empty response for '{did}' from {self.plc_hostname}"
            )
        try:
            document = Document.model_validate(body)
        except ValidationError as e:
            return ResolutionResult.from_error(
                ErrorKind.invalid_did_document, f"Invalid DID document for '{did}': {e}"
            )
        return ResolutionResult.from_document(document)
