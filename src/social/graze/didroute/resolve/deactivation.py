"""
Deactivation conventions.

How "deactivated" is signalled depends on the store behind a DID method:

- ``NativeDeactivation``: the store itself knows (a ledger sentinel key, a
  directory tombstone). The method resolver already sets
  ``DocumentMetadata.deactivated`` and nothing else happens here.
- ``EmbeddedFlagDeactivation``: the store has no deactivation primitive, so a
  prior update wrote a non-standard boolean member into the served document.
  The flag is lifted into ``DocumentMetadata.deactivated`` and removed from
  the document so consumers see a conformant document.

This is a per-method extension point. It is not a general contract of DID
documents and the flag name is not part of any standard.
"""

import logging
from abc import ABC, abstractmethod

from social.graze.didroute.model import ResolutionResult

logger = logging.getLogger(__name__)


class DeactivationConvention(ABC):
    @abstractmethod
    def apply(self, did: str, result: ResolutionResult) -> ResolutionResult:
        """Normalize method-specific deactivation signalling into metadata."""
        ...


class NativeDeactivation(DeactivationConvention):
    def apply(self, did: str, result: ResolutionResult) -> ResolutionResult:
        return result


class EmbeddedFlagDeactivation(DeactivationConvention):
    """Lift a boolean document member into ``DocumentMetadata.deactivated``.

    Only a literal JSON ``true`` marks the document deactivated. The member is
    stripped from the document whatever its value.
    """

    def __init__(self, field: str = "deactivated"):
        self.field = field

    def apply(self, did: str, result: ResolutionResult) -> ResolutionResult:
        if result.document is None or not result.document.model_extra:
            return result

        flag = result.document.model_extra.pop(self.field, None)
        if flag is True:
            logger.debug("Document for %s carries embedded %s flag", did, self.field)
            result.document_metadata.deactivated = True
        return result
