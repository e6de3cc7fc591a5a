"""
Resolution Exceptions

Errors raised across the public ``resolve`` boundary. Ledger and "not found"
failures are never raised from here: they travel as data inside
``ResolutionMetadata.error``. What is raised is either a configuration error
(``UnsupportedMethod``, ``DuplicateMethodRegistration``), a caller error
(``InvalidDid``), a trust violation (``InconsistentRedirect``,
``RedirectLoopDetected``) or a transient fault (``ResolutionTimeout``).
Callers branch on this split.
"""

from typing import List, Sequence


class DidResolutionError(Exception):
    """Base class for all resolution errors."""


class InvalidDid(DidResolutionError, ValueError):
    """The input is not a syntactically valid DID."""

    def __init__(self, did: str, reason: str = "malformed DID"):
        super().__init__(f"Invalid DID '{did}': {reason}")
        self.did = did


class UnsupportedMethod(DidResolutionError):
    """No resolver is registered for the DID's method."""

    def __init__(self, method: str, did: str):
        super().__init__(f"No resolver registered for method '{method}' ({did})")
        self.method = method
        self.did = did


class DuplicateMethodRegistration(DidResolutionError, ValueError):
    """Two resolvers claimed the same DID method."""

    def __init__(self, method: str):
        super().__init__(f"Method '{method}' is registered by more than one resolver")
        self.method = method


class InconsistentRedirect(DidResolutionError):
    """A successor document does not list its predecessor in ``alsoKnownAs``."""

    def __init__(self, expected: str, did: str):
        super().__init__(
            f"DID document for '{did}' does not contain expected alsoKnownAs '{expected}'"
        )
        self.expected = expected
        self.did = did


class RedirectLoopDetected(DidResolutionError):
    """The redirect chain revisited a DID or exceeded the hop bound."""

    def __init__(self, chain: Sequence[str], max_hops: int):
        super().__init__(
            f"Redirect chain {' -> '.join(chain)} exceeds {max_hops} hops or loops"
        )
        self.chain: List[str] = list(chain)
        self.max_hops = max_hops


class ResolutionTimeout(DidResolutionError):
    """A single hop did not complete within the configured timeout."""

    def __init__(self, did: str, timeout: float):
        super().__init__(f"Resolving '{did}' timed out after {timeout}s")
        self.did = did
        self.timeout = timeout


class LedgerError(DidResolutionError):
    """Base class for ledger read failures.

    These never cross the ledger resolver's boundary; they are converted into
    ``notFound`` resolution results.
    """


class LedgerRequestError(LedgerError):
    """A ledger read request failed in transport or returned a bad reply."""

    def __init__(self, pool: str, message: str):
        super().__init__(f"Ledger '{pool}' request failed: {message}")
        self.pool = pool


class LedgerPoolNotConfigured(LedgerError):
    """No ledger pool is available to serve the request."""


class DidNotFoundOnLedger(LedgerError):
    """No public-key record exists for the DID on any configured pool."""

    def __init__(self, did: str):
        super().__init__(f"DID {did} not found")
        self.did = did
