"""
Resolver dispatch by DID method.

The method-to-resolver mapping is built once at construction. Registering two
resolvers for the same method is a configuration error and fails immediately
rather than silently preferring one of them.
"""

import logging
from typing import Dict, Iterable, List

from social.graze.didroute.did import parse_did
from social.graze.didroute.exceptions import (
    DuplicateMethodRegistration,
    UnsupportedMethod,
)
from social.graze.didroute.model import ResolutionResult
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext

logger = logging.getLogger(__name__)


class ResolverDispatcher:
    """Routes a DID to the resolver registered for its method."""

    def __init__(self, resolvers: Iterable[MethodResolver]):
        self._resolvers: Dict[str, MethodResolver] = {}
        for resolver in resolvers:
            for method in resolver.supported_methods:
                if method in self._resolvers:
                    raise DuplicateMethodRegistration(method)
                self._resolvers[method] = resolver

    @property
    def supported_methods(self) -> List[str]:
        return sorted(self._resolvers.keys())

    async def resolve_once(self, context: ResolverContext, did: str) -> ResolutionResult:
        """Resolve ``did`` with its method resolver, without following redirects.

        Raises:
            InvalidDid: if ``did`` cannot be parsed
            UnsupportedMethod: if no resolver handles the DID's method
        """
        parsed = parse_did(did)
        resolver = self._resolvers.get(parsed.method)
        if resolver is None:
            raise UnsupportedMethod(parsed.method, did)

        logger.debug("Resolving %s with %s", did, type(resolver).__name__)
        result = await resolver.resolve(context, parsed.did, parsed)
        return resolver.deactivation.apply(parsed.did, result)
