"""
DID Resolution

This package resolves DIDs to DID documents across several DID methods and
follows identity continuity redirects when a DID is deactivated in favour of
a successor.

Key Components:
- base.py: MethodResolver interface and the ResolverContext passed to every call
- deactivation.py: Per-method conventions for signalling deactivation
- dispatcher.py: Method-to-resolver routing (ResolverDispatcher)
- redirect.py: Redirect-chasing resolution (RedirectingResolver)
- key.py, web.py, plc.py, sov.py: Method resolvers
- __main__.py: CLI interface for resolution

Resolution Flow:
1. Parse the DID and pick the resolver registered for its method
2. Resolve once and normalize the method's deactivation signal into metadata
3. If the document is deactivated and names a successor in ``alsoKnownAs``,
   resolve the successor and check that it names the predecessor back
4. Repeat until an active document, a deactivated document without
   successor, or an error is reached

Ledger and "not found" failures are returned as data in the resolution
metadata. Configuration errors and trust violations are raised.
"""

from social.graze.didroute.resolve.base import MethodResolver, ResolverContext
from social.graze.didroute.resolve.dispatcher import ResolverDispatcher
from social.graze.didroute.resolve.redirect import RedirectingResolver

__all__ = [
    "MethodResolver",
    "RedirectingResolver",
    "ResolverContext",
    "ResolverDispatcher",
]
