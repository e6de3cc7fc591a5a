"""
DID Document and resolution result models.

These pydantic models mirror the JSON shape of the W3C DID resolution output
(``didDocument``, ``didDocumentMetadata``, ``didResolutionMetadata``). Python
attribute names are snake_case; the JSON names are carried as aliases and are
used when serializing with ``serialize()``.

Every resolution call builds new model instances. Resolvers never keep a
reference to a result after returning it.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DID_CONTEXT = "https://w3id.org/did/v1"
DID_LD_JSON = "application/did+ld+json"


class ErrorKind(str, Enum):
    """Error values carried in ``ResolutionMetadata.error``."""

    not_found = "notFound"
    invalid_did = "invalidDid"
    invalid_did_document = "invalidDidDocument"
    internal_error = "internalError"


class VerificationMethod(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: str
    controller: str
    public_key_base58: Optional[str] = Field(default=None, alias="publicKeyBase58")
    public_key_multibase: Optional[str] = Field(
        default=None, alias="publicKeyMultibase"
    )
    public_key_jwk: Optional[Dict[str, Any]] = Field(default=None, alias="publicKeyJwk")


class Service(BaseModel):
    """Service endpoint descriptor.

    ``service_endpoint`` is either a URI string or, for DIDComm v2 services,
    an object with ``uri``, ``routingKeys`` and ``accept`` members.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: Union[str, List[str]]
    service_endpoint: Any = Field(alias="serviceEndpoint")
    priority: Optional[int] = None
    recipient_keys: Optional[List[str]] = Field(default=None, alias="recipientKeys")
    routing_keys: Optional[List[str]] = Field(default=None, alias="routingKeys")
    accept: Optional[List[str]] = None


class Document(BaseModel):
    """Resolved DID document.

    Members outside the modelled set are kept in ``model_extra`` so method
    specific extensions survive a parse and can be inspected by a
    deactivation convention.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    context: List[Union[str, Dict[str, Any]]] = Field(
        default_factory=lambda: [DID_CONTEXT], alias="@context"
    )
    id: str
    also_known_as: Optional[List[str]] = Field(default=None, alias="alsoKnownAs")
    controller: Optional[Union[str, List[str]]] = None
    verification_method: List[VerificationMethod] = Field(
        default_factory=list, alias="verificationMethod"
    )
    authentication: List[Union[str, VerificationMethod]] = Field(default_factory=list)
    assertion_method: List[Union[str, VerificationMethod]] = Field(
        default_factory=list, alias="assertionMethod"
    )
    key_agreement: List[Union[str, VerificationMethod]] = Field(
        default_factory=list, alias="keyAgreement"
    )
    capability_invocation: Optional[List[Union[str, VerificationMethod]]] = Field(
        default=None, alias="capabilityInvocation"
    )
    capability_delegation: Optional[List[Union[str, VerificationMethod]]] = Field(
        default=None, alias="capabilityDelegation"
    )
    service: List[Service] = Field(default_factory=list)

    @field_validator("context", mode="before")
    @classmethod
    def normalize_context(cls, v) -> List[Union[str, Dict[str, Any]]]:
        if isinstance(v, (str, dict)):
            return [v]
        return v

    def add_context(self, context: str) -> "Document":
        """Append a JSON-LD context, keeping insertion order and no duplicates."""
        if context not in self.context:
            self.context.append(context)
        return self

    def lists_also_known_as(self, did: str) -> bool:
        return did in (self.also_known_as or [])

    def serialize(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class DocumentMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    deactivated: bool = False


class ResolutionMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content_type: Optional[str] = Field(default=None, alias="contentType")
    error: Optional[ErrorKind] = None
    message: Optional[str] = None


class ResolutionResult(BaseModel):
    """The (document, document metadata, resolution metadata) triple.

    A result with ``resolution_metadata.error`` set never carries a document.
    """

    model_config = ConfigDict(populate_by_name=True)

    document: Optional[Document] = Field(default=None, alias="didDocument")
    document_metadata: DocumentMetadata = Field(
        default_factory=DocumentMetadata, alias="didDocumentMetadata"
    )
    resolution_metadata: ResolutionMetadata = Field(
        default_factory=ResolutionMetadata, alias="didResolutionMetadata"
    )

    @model_validator(mode="after")
    def check_error_has_no_document(self) -> "ResolutionResult":
        if self.resolution_metadata.error is not None and self.document is not None:
            raise ValueError("a resolution result with an error cannot carry a document")
        return self

    @classmethod
    def from_document(
        cls, document: Document, deactivated: bool = False
    ) -> "ResolutionResult":
        return cls(
            document=document,
            document_metadata=DocumentMetadata(deactivated=deactivated),
            resolution_metadata=ResolutionMetadata(content_type=DID_LD_JSON),
        )

    @classmethod
    def from_error(cls, error: ErrorKind, message: str) -> "ResolutionResult":
        return cls(
            document=None,
            document_metadata=DocumentMetadata(),
            resolution_metadata=ResolutionMetadata(error=error, message=message),
        )

    @property
    def deactivated(self) -> bool:
        return self.document_metadata.deactivated

    @property
    def also_known_as(self) -> List[str]:
        if self.document is None:
            return []
        return list(self.document.also_known_as or [])

    def serialize(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
