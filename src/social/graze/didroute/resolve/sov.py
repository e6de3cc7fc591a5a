"""
did:sov resolution from raw ledger records.

Resolution state is derived from three ledger reads:

1. NYM: the verkey. A verkey equal to the dead key means the DID is
   deactivated.
2. ATTRIB ``alsoKnownAs``: ``{"alsoKnownAs": [did, ...]}``, the successor
   identities of a deactivated DID.
3. ATTRIB ``endpoint``: ``{"endpoint": {"endpoint": url, "types": [...],
   "routingKeys": [...], ...}}``, read for active DIDs only.

This resolver never raises. Any failure, including a failed attribute read,
comes back as a ``notFound`` result carrying the original error message.
"""

import json
import logging
from typing import List, Optional

import sentry_sdk

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.exceptions import (
    DidNotFoundOnLedger,
    LedgerPoolNotConfigured,
)
from social.graze.didroute.ledger.pool import GetAttribRequest, LedgerPool
from social.graze.didroute.ledger.services import (
    EndpointAttrib,
    add_services_from_endpoint_attrib,
    sov_document_from_did,
)
from social.graze.didroute.ledger.verkey import is_deactivated_verkey
from social.graze.didroute.model import Document, ErrorKind, ResolutionResult
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext

logger = logging.getLogger(__name__)


async def get_attrib(pool: LedgerPool, did: str, raw: str) -> Optional[dict]:
    """Read a raw ATTRIB and decode its JSON payload.

    Returns:
        Decoded attribute object, or None when the ledger holds no such attribute

    Raises:
        LedgerError: the read failed
        ValueError: the payload is not a JSON object
    """
    logger.debug(
        "Submitting get %s ATTRIB request for did '%s' to ledger '%s'",
        raw,
        did,
        pool.name,
    )
    reply = await pool.submit_request(GetAttribRequest(target_did=did, raw=raw))
    if not reply.result.data:
        return None

    payload = json.loads(reply.result.data)
    if not isinstance(payload, dict):
        raise ValueError(f"{raw} ATTRIB for did '{did}' is not a JSON object")
    return payload


async def get_also_known_as(pool: LedgerPool, did: str) -> Optional[List[str]]:
    try:
        payload = await get_attrib(pool, did, "alsoKnownAs")
    except Exception:
        logger.error(
            "Error retrieving alsoKnownAs for did '%s' from ledger '%s'",
            did,
            pool.name,
            exc_info=True,
        )
        raise

    if payload is None:
        return None
    also_known_as = payload.get("alsoKnownAs")
    logger.debug(
        "Got alsoKnownAs %s for did '%s' from ledger '%s'",
        also_known_as,
        did,
        pool.name,
    )
    if also_known_as is None:
        return None
    if not isinstance(also_known_as, list) or not all(
        isinstance(aka, str) for aka in also_known_as
    ):
        raise ValueError(f"alsoKnownAs ATTRIB for did '{did}' is not a list of strings")
    return also_known_as


async def get_endpoints(pool: LedgerPool, did: str) -> Optional[EndpointAttrib]:
    try:
        payload = await get_attrib(pool, did, "endpoint")
    except Exception:
        logger.error(
            "Error retrieving endpoints for did '%s' from ledger '%s'",
            did,
            pool.name,
            exc_info=True,
        )
        raise

    if payload is None or payload.get("endpoint") is None:
        return None
    endpoints = EndpointAttrib.model_validate(payload["endpoint"])
    logger.debug(
        "Got endpoints %s for did '%s' from ledger '%s'",
        endpoints.model_dump(by_alias=True, exclude_none=True),
        did,
        pool.name,
    )
    return endpoints


class SovLedgerResolver(MethodResolver):
    """Resolver for ``did:sov`` DIDs backed by ledger pools in the context."""

    supported_methods = frozenset({"sov"})

    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        try:
            if context.ledger_pools is None:
                raise LedgerPoolNotConfigured("No ledger pools in resolver context")

            pool, nym = await context.ledger_pools.pool_for_did(parsed.id)
            if not nym.verkey:
                raise ValueError(f"NYM for did '{parsed.id}' has no verkey")

            also_known_as = await get_also_known_as(pool, parsed.id)

            if is_deactivated_verkey(parsed.id, nym.verkey):
                logger.debug("DID %s has the dead verkey, treating as deactivated", did)
                document = Document(id=did, also_known_as=also_known_as)
                return ResolutionResult.from_document(document, deactivated=True)

            endpoints = await get_endpoints(pool, parsed.id)

            document = sov_document_from_did(did, nym.verkey)
            if endpoints is not None:
                add_services_from_endpoint_attrib(
                    document, did, endpoints, f"{did}#key-agreement-1"
                )
            document.also_known_as = also_known_as
            return ResolutionResult.from_document(document)
        except DidNotFoundOnLedger as e:
            logger.debug("DID %s not found on any ledger pool", did)
            return ResolutionResult.from_error(
                ErrorKind.not_found,
                f"resolver_error: Unable to resolve did '{did}': {e}",
            )
        except Exception as e:
            logger.error("Unable to resolve did '%s': %s", did, e)
            sentry_sdk.capture_exception(e)
            return ResolutionResult.from_error(
                ErrorKind.not_found,
                f"resolver_error: Unable to resolve did '{did}': {e}",
            )
