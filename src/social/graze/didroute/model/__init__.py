"""
Data Models

This package defines the pydantic models shared by every resolver: the DID
document, its verification methods and services, and the resolution result
triple returned from each resolution call.

Key Models:
- Document: the resolved identity document (keys, services, alsoKnownAs)
- DocumentMetadata: lifecycle facts, currently only ``deactivated``
- ResolutionMetadata: content type and structured error kind/message
- ResolutionResult: the (document, document metadata, resolution metadata) triple

Errors that callers are expected to branch on as data (``notFound`` and
friends) live in ``ResolutionMetadata.error``; see ``ErrorKind``.
"""

from social.graze.didroute.model.document import (
    DID_CONTEXT,
    DID_LD_JSON,
    Document,
    DocumentMetadata,
    ErrorKind,
    ResolutionMetadata,
    ResolutionResult,
    Service,
    VerificationMethod,
)

__all__ = [
    "DID_CONTEXT",
    "DID_LD_JSON",
    "Document",
    "DocumentMetadata",
    "ErrorKind",
    "ResolutionMetadata",
    "ResolutionResult",
    "Service",
    "VerificationMethod",
]
