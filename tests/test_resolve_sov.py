"""
Unit tests for the ledger-backed did:sov resolver in social.graze.didroute.resolve.sov

Tests cover deactivation through the dead verkey, alsoKnownAs and endpoint
attributes, document synthesis and the errors-as-data contract.
"""

import pytest
from unittest.mock import Mock, patch

from social.graze.didroute.did import parse_did
from social.graze.didroute.exceptions import LedgerRequestError
from social.graze.didroute.keys import bytes_to_b58
from social.graze.didroute.ledger.verkey import DEAD_VERKEY
from social.graze.didroute.model import ErrorKind
from social.graze.didroute.resolve.base import ResolverContext
from social.graze.didroute.resolve.sov import SovLedgerResolver
from tests.test_helpers import FakeLedgerPool, ledger_context, sov_identity


async def resolve(pool: FakeLedgerPool, did: str):
    return await SovLedgerResolver().resolve(ledger_context(pool), did, parse_did(did))


class TestActiveDid:
    """Test suite for resolving active ledger DIDs."""

    @pytest.mark.asyncio
    async def test_resolve_active_without_attributes(self):
        """Test an active DID yields a key document without services."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(nyms={identifier: {"dest": identifier, "verkey": verkey}})

        result = await resolve(pool, did)

        assert result.resolution_metadata.error is None
        assert result.resolution_metadata.content_type == "application/did+ld+json"
        assert result.deactivated is False
        assert result.document.id == did
        assert result.document.verification_method[0].public_key_base58 == verkey
        assert result.document.service == []
        assert result.document.also_known_as is None
        assert pool.requested_paths() == [
            f"nym/{identifier}",
            f"attrib/{identifier}/alsoKnownAs",
            f"attrib/{identifier}/endpoint",
        ]

    @pytest.mark.asyncio
    async def test_resolve_abbreviated_verkey(self):
        """Test abbreviated verkeys are expanded in the document."""
        did, verkey, public_key = sov_identity(3)
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": "~" + bytes_to_b58(public_key[16:])}}
        )

        result = await resolve(pool, did)

        assert result.document.verification_method[0].public_key_base58 == verkey

    @pytest.mark.asyncio
    async def test_resolve_active_with_endpoint_and_also_known_as(self):
        """Test endpoint services and alsoKnownAs are attached to active DIDs."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            attribs={
                (identifier, "alsoKnownAs"): {"alsoKnownAs": ["did:sov:OldIdentifier"]},
                (identifier, "endpoint"): {
                    "endpoint": {
                        "endpoint": "https://agent.example.com",
                        "types": ["endpoint", "DIDCommMessaging"],
                        "profile": "https://profile.example.com",
                    }
                },
            },
        )

        result = await resolve(pool, did)

        assert result.document.also_known_as == ["did:sov:OldIdentifier"]
        assert [service.id for service in result.document.service] == [
            f"{did}#endpoint",
            f"{did}#didcomm-messaging-1",
            f"{did}#profile",
        ]
        assert "https://didcomm.org/messaging/contexts/v2" in result.document.context

    @pytest.mark.asyncio
    @pytest.mark.parametrize("types", [[1], "endpoint", [None], {"a": 1}])
    async def test_malformed_endpoint_types_use_default(self, types):
        """Test unrecognized endpoint types fall back to the default services."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            attribs={
                (identifier, "endpoint"): {
                    "endpoint": {"endpoint": "https://a.example", "types": types}
                }
            },
        )

        result = await resolve(pool, did)

        assert result.resolution_metadata.error is None
        assert [service.type for service in result.document.service] == [
            "endpoint",
            "did-communication",
        ]

    @pytest.mark.asyncio
    async def test_endpoint_attrib_without_endpoint_object(self):
        """Test an endpoint attribute lacking the endpoint member adds no services."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            attribs={(identifier, "endpoint"): {"other": "value"}},
        )

        result = await resolve(pool, did)

        assert result.document.service == []


class TestDeactivatedDid:
    """Test suite for resolving deactivated ledger DIDs."""

    @pytest.mark.asyncio
    async def test_dead_verkey_deactivates(self):
        """Test the dead verkey yields a minimal deactivated document."""
        did, _, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": DEAD_VERKEY}},
            attribs={(identifier, "alsoKnownAs"): {"alsoKnownAs": ["did:sov:NewIdentifier"]}},
        )

        result = await resolve(pool, did)

        assert result.deactivated is True
        assert result.document.id == did
        assert result.document.also_known_as == ["did:sov:NewIdentifier"]
        assert result.document.verification_method == []
        assert result.document.service == []
        assert f"attrib/{identifier}/endpoint" not in pool.requested_paths()

    @pytest.mark.asyncio
    async def test_dead_verkey_without_successor(self):
        """Test a deactivated DID without alsoKnownAs is still a document."""
        did, _, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(nyms={identifier: {"verkey": DEAD_VERKEY}})

        result = await resolve(pool, did)

        assert result.deactivated is True
        assert result.document.also_known_as is None

    @pytest.mark.asyncio
    async def test_also_known_as_read_failure_is_error(self):
        """Test a failed alsoKnownAs read is surfaced, not dropped."""
        did, _, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": DEAD_VERKEY}},
            failures={
                f"attrib/{identifier}/alsoKnownAs": LedgerRequestError("test", "timeout")
            },
        )

        result = await resolve(pool, did)

        assert result.document is None
        assert result.resolution_metadata.error == ErrorKind.not_found
        assert "timeout" in result.resolution_metadata.message


class TestErrorsAsData:
    """Test suite for the resolver's never-raise contract."""

    @pytest.mark.asyncio
    @patch("social.graze.didroute.resolve.sov.sentry_sdk")
    async def test_nym_not_found(self, mock_sentry):
        """Test a ledger miss is a notFound result that is not reported."""
        did, _, _ = sov_identity()
        result = await resolve(FakeLedgerPool(), did)

        mock_sentry.capture_exception.assert_not_called()
        assert result.document is None
        assert result.resolution_metadata.error == ErrorKind.not_found
        assert result.resolution_metadata.message.startswith(
            f"resolver_error: Unable to resolve did '{did}'"
        )

    @pytest.mark.asyncio
    @patch("social.graze.didroute.resolve.sov.sentry_sdk")
    async def test_endpoint_read_failure(self, mock_sentry):
        """Test a failed endpoint read becomes a notFound result and is reported."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            failures={f"attrib/{identifier}/endpoint": LedgerRequestError("test", "down")},
        )

        result = await resolve(pool, did)

        assert result.resolution_metadata.error == ErrorKind.not_found
        mock_sentry.capture_exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_malformed_attribute_json(self):
        """Test a malformed attribute payload becomes a notFound result."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            attribs={(identifier, "alsoKnownAs"): "{not json"},
        )

        result = await resolve(pool, did)

        assert result.resolution_metadata.error == ErrorKind.not_found

    @pytest.mark.asyncio
    async def test_also_known_as_wrong_shape(self):
        """Test a non-list alsoKnownAs payload becomes a notFound result."""
        did, verkey, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(
            nyms={identifier: {"verkey": verkey}},
            attribs={(identifier, "alsoKnownAs"): {"alsoKnownAs": "did:sov:abc"}},
        )

        result = await resolve(pool, did)

        assert result.resolution_metadata.error == ErrorKind.not_found

    @pytest.mark.asyncio
    async def test_nym_without_verkey(self):
        """Test a NYM record without a verkey becomes a notFound result."""
        did, _, _ = sov_identity()
        identifier = did.split(":")[-1]
        pool = FakeLedgerPool(nyms={identifier: {"dest": identifier, "verkey": None}})

        result = await resolve(pool, did)

        assert result.resolution_metadata.error == ErrorKind.not_found

    @pytest.mark.asyncio
    async def test_no_ledger_pools_in_context(self):
        """Test a context without pools becomes a notFound result."""
        did, _, _ = sov_identity()
        context = ResolverContext(session=Mock())

        result = await SovLedgerResolver().resolve(context, did, parse_did(did))

        assert result.resolution_metadata.error == ErrorKind.not_found
