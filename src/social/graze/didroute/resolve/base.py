"""
Method resolver interface and resolution context.

A ``MethodResolver`` handles one DID method family. It declares the methods it
supports and the deactivation convention its store uses; the dispatcher reads
both. Shared transport handles are not module state: they travel in a
``ResolverContext`` passed into every call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, FrozenSet, Optional

from aiohttp import ClientSession

from social.graze.didroute.did import ParsedDid
from social.graze.didroute.ledger.pool import LedgerPoolRegistry
from social.graze.didroute.model import ResolutionResult
from social.graze.didroute.resolve.deactivation import (
    DeactivationConvention,
    NativeDeactivation,
)


@dataclass(frozen=True)
class ResolverContext:
    """Shared, read-mostly handles used while resolving.

    Attributes:
        session: HTTP client session for hosted-document and directory fetches
        ledger_pools: Ledger pools available to ledger-anchored methods
    """

    session: ClientSession
    ledger_pools: Optional[LedgerPoolRegistry] = None


class MethodResolver(ABC):
    supported_methods: ClassVar[FrozenSet[str]] = frozenset()
    deactivation: ClassVar[DeactivationConvention] = NativeDeactivation()

    @abstractmethod
    async def resolve(
        self, context: ResolverContext, did: str, parsed: ParsedDid
    ) -> ResolutionResult:
        """Resolve a single DID without following redirects."""
        ...
