"""
DID document synthesis for ledger-anchored DIDs.

The ledger holds no DID document, only a verkey and free-text attributes. The
document is built from them:

- an Ed25519 verification method (``#key-1``) from the full verkey
- an X25519 key agreement method (``#key-agreement-1``) converted from it
- services from the ``endpoint`` attribute, one per endpoint type, plus one
  generic service for each additional key in the attribute

Endpoint types follow the Sovrin DID method rules: when ``types`` is missing,
empty, or contains anything outside the known vocabulary, the default pair
``endpoint`` and ``did-communication`` is used.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from social.graze.didroute.keys import (
    ED25519_2018_CONTEXT,
    ED25519_VERIFICATION_KEY_2018,
    X25519_2019_CONTEXT,
    X25519_KEY_AGREEMENT_KEY_2019,
    ed25519_b58_to_x25519_b58,
)
from social.graze.didroute.ledger.verkey import full_verkey
from social.graze.didroute.model import Document, Service, VerificationMethod


DIDCOMM_V2_CONTEXT = "https://didcomm.org/messaging/contexts/v2"

ENDPOINT_TYPES = ("endpoint", "did-communication", "DIDComm", "DIDCommMessaging")
DEFAULT_ENDPOINT_TYPES = ["endpoint", "did-communication"]


class EndpointAttrib(BaseModel):
    """Contents of the ``endpoint`` ATTRIB.

    Keys other than ``endpoint``, ``types`` and ``routingKeys`` are kept as
    extras and each becomes a service named after the key.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    endpoint: Optional[str] = None
    types: Optional[Any] = None
    routing_keys: Optional[List[str]] = Field(default=None, alias="routingKeys")


def process_endpoint_types(types: Any) -> List[str]:
    if not isinstance(types, list) or len(types) == 0:
        return list(DEFAULT_ENDPOINT_TYPES)

    for endpoint_type in types:
        if not isinstance(endpoint_type, str) or endpoint_type not in ENDPOINT_TYPES:
            return list(DEFAULT_ENDPOINT_TYPES)

    return list(types)


def sov_document_from_did(did: str, verkey: str) -> Document:
    """Build the key material part of a ledger DID document."""
    verification_method_id = f"{did}#key-1"
    key_agreement_id = f"{did}#key-agreement-1"

    public_key_base58 = full_verkey(did, verkey)
    public_key_x25519 = ed25519_b58_to_x25519_b58(public_key_base58)

    document = Document(id=did)
    document.add_context(ED25519_2018_CONTEXT)
    document.add_context(X25519_2019_CONTEXT)
    document.verification_method.extend(
        [
            VerificationMethod(
                id=verification_method_id,
                type=ED25519_VERIFICATION_KEY_2018,
                controller=did,
                public_key_base58=public_key_base58,
            ),
            VerificationMethod(
                id=key_agreement_id,
                type=X25519_KEY_AGREEMENT_KEY_2019,
                controller=did,
                public_key_base58=public_key_x25519,
            ),
        ]
    )
    document.authentication.append(verification_method_id)
    document.assertion_method.append(verification_method_id)
    document.key_agreement.append(key_agreement_id)
    return document


def add_services_from_endpoint_attrib(
    document: Document, did: str, attrib: EndpointAttrib, key_agreement_id: str
) -> Document:
    endpoint = attrib.endpoint
    routing_keys = attrib.routing_keys

    if endpoint:
        types = process_endpoint_types(attrib.types)

        if "endpoint" in types:
            document.service.append(
                Service(id=f"{did}#endpoint", type="endpoint", service_endpoint=endpoint)
            )

        if "did-communication" in types:
            document.service.append(
                Service(
                    id=f"{did}#did-communication",
                    type="did-communication",
                    service_endpoint=endpoint,
                    priority=0,
                    routing_keys=routing_keys or [],
                    recipient_keys=[key_agreement_id],
                    accept=["didcomm/aip2;env=rfc19"],
                )
            )

        if "DIDCommMessaging" in types:
            service_endpoint: Dict[str, Any] = {"uri": endpoint, "accept": ["didcomm/v2"]}
            if routing_keys is not None:
                service_endpoint["routingKeys"] = routing_keys
            document.service.append(
                Service(
                    id=f"{did}#didcomm-messaging-1",
                    type="DIDCommMessaging",
                    service_endpoint=service_endpoint,
                )
            )
            document.add_context(DIDCOMM_V2_CONTEXT)

        # Legacy DIDComm v2 service shape
        if "DIDComm" in types:
            document.service.append(
                Service(
                    id=f"{did}#didcomm-1",
                    type="DIDComm",
                    service_endpoint=endpoint,
                    routing_keys=routing_keys,
                    accept=["didcomm/v2"],
                )
            )
            document.add_context(DIDCOMM_V2_CONTEXT)

    for name, value in (attrib.model_extra or {}).items():
        document.service.append(
            Service(id=f"{did}#{name}", type=name, service_endpoint=value)
        )

    return document
