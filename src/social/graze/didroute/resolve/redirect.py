"""
Redirect-chasing resolution.

When a resolved DID is deactivated and its document names a successor in
``alsoKnownAs``, resolution continues with the successor. Each successor must
acknowledge its predecessor in its own ``alsoKnownAs``; a successor that does
not is rejected with ``InconsistentRedirect``.

The chase is bounded. A DID seen twice in one chain, or a chain longer than
``max_hops`` redirects, fails with ``RedirectLoopDetected``.

All chase state is local to one ``resolve`` call, so concurrent resolutions
share nothing but the context's transport handles.
"""

import asyncio
import logging
from typing import List, Optional

from social.graze.didroute.did import parse_did
from social.graze.didroute.exceptions import (
    InconsistentRedirect,
    RedirectLoopDetected,
    ResolutionTimeout,
)
from social.graze.didroute.model import ResolutionResult
from social.graze.didroute.resolve.base import ResolverContext
from social.graze.didroute.resolve.dispatcher import ResolverDispatcher

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOPS = 8


class RedirectingResolver:
    """Resolves DIDs, following deactivation redirects through ``alsoKnownAs``.

    Args:
        dispatcher: Dispatcher used for every hop
        max_hops: Maximum number of redirects followed in one call
        hop_timeout: Seconds allowed for each hop, or None for no limit
    """

    def __init__(
        self,
        dispatcher: ResolverDispatcher,
        max_hops: int = DEFAULT_MAX_HOPS,
        hop_timeout: Optional[float] = None,
    ):
        if max_hops < 0:
            raise ValueError("max_hops must not be negative")
        self.dispatcher = dispatcher
        self.max_hops = max_hops
        self.hop_timeout = hop_timeout

    async def resolve(self, context: ResolverContext, did: str) -> ResolutionResult:
        """Resolve ``did``, following redirects from deactivated documents.

        Returns:
            The first non-deactivated result, or a deactivated result that
            names no successor. ``notFound``-style failures are returned as
            data in the result's resolution metadata.

        Raises:
            InconsistentRedirect: a successor does not list its predecessor
            RedirectLoopDetected: the chain loops or exceeds ``max_hops``
            UnsupportedMethod: a DID in the chain has no registered resolver
            ResolutionTimeout: a hop exceeded ``hop_timeout``
        """
        current_did = parse_did(did).did
        expected_back_reference: Optional[str] = None
        chain: List[str] = [current_did]

        while True:
            result = await self._resolve_hop(context, current_did)

            if expected_back_reference is not None and (
                result.document is None
                or not result.document.lists_also_known_as(expected_back_reference)
            ):
                raise InconsistentRedirect(expected_back_reference, current_did)

            if not result.deactivated:
                return result

            also_known_as = result.also_known_as
            if len(also_known_as) == 0:
                return result

            # Only the first successor is followed.
            successor = also_known_as[0]
            if len(also_known_as) > 1:
                logger.warning(
                    "DID %s lists %d alsoKnownAs entries, following %s",
                    current_did,
                    len(also_known_as),
                    successor,
                )

            if successor in chain or len(chain) > self.max_hops:
                raise RedirectLoopDetected(chain + [successor], self.max_hops)

            logger.info(
                "DID %s is deactivated, redirecting to alsoKnownAs %s",
                current_did,
                successor,
            )
            expected_back_reference = current_did
            current_did = successor
            chain.append(successor)

    async def _resolve_hop(
        self, context: ResolverContext, did: str
    ) -> ResolutionResult:
        if self.hop_timeout is None:
            return await self.dispatcher.resolve_once(context, did)
        try:
            async with asyncio.timeout(self.hop_timeout):
                return await self.dispatcher.resolve_once(context, did)
        except TimeoutError as e:
            raise ResolutionTimeout(did, self.hop_timeout) from e
