"""
Unit tests for ledger pool access in social.graze.didroute.ledger.pool

Tests cover the HTTP read gateway client and pool selection across several
configured pools.
"""

import pytest
from unittest.mock import AsyncMock
from aiohttp import ClientConnectionError, ClientResponse, ClientSession

from social.graze.didroute.exceptions import (
    DidNotFoundOnLedger,
    LedgerPoolNotConfigured,
    LedgerRequestError,
)
from social.graze.didroute.ledger.pool import (
    GetAttribRequest,
    GetNymRequest,
    HttpLedgerPool,
    LedgerPoolRegistry,
    LedgerReplyResult,
    read_nym,
)
from tests.test_helpers import FakeLedgerPool


class TestRequests:
    """Test suite for read request paths."""

    def test_nym_path(self):
        """Test NYM requests address the nym route."""
        assert GetNymRequest(dest="WRfXPg8dantKVubE3HX8pw").path() == "nym/WRfXPg8dantKVubE3HX8pw"

    def test_attrib_path(self):
        """Test ATTRIB requests address the attrib route with the raw name."""
        request = GetAttribRequest(target_did="WRfXPg8dantKVubE3HX8pw", raw="alsoKnownAs")
        assert request.path() == "attrib/WRfXPg8dantKVubE3HX8pw/alsoKnownAs"

    def test_reply_data_object_reencoded(self):
        """Test gateways returning decoded payloads are normalized to JSON strings."""
        result = LedgerReplyResult.model_validate({"data": {"verkey": "abc"}})
        assert result.data == '{"verkey": "abc"}'


class TestHttpLedgerPool:
    """Test suite for the HTTP ledger pool client."""

    @pytest.mark.asyncio
    async def test_submit_request_success(self):
        """Test a successful read returns the parsed reply."""
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 200
        mock_response.json.return_value = {
            "op": "REPLY",
            "result": {"data": '{"dest": "abc", "verkey": "def"}'},
        }
        mock_session.get.return_value.__aenter__.return_value = mock_response

        pool = HttpLedgerPool("sovrin", "https://vdr.example.com/", mock_session)
        reply = await pool.submit_request(GetNymRequest(dest="abc"))

        assert reply.result.data == '{"dest": "abc", "verkey": "def"}'
        assert mock_session.get.call_args[0][0] == "https://vdr.example.com/nym/abc"

    @pytest.mark.asyncio
    async def test_submit_request_bad_status(self):
        """Test non-200 replies raise LedgerRequestError."""
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 503
        mock_session.get.return_value.__aenter__.return_value = mock_response

        pool = HttpLedgerPool("sovrin", "https://vdr.example.com", mock_session)
        with pytest.raises(LedgerRequestError) as excinfo:
            await pool.submit_request(GetNymRequest(dest="abc"))
        assert excinfo.value.pool == "sovrin"
        assert "503" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_submit_request_transport_error(self):
        """Test transport failures are wrapped in LedgerRequestError."""
        mock_session = AsyncMock(spec=ClientSession)
        mock_session.get.return_value.__aenter__.side_effect = ClientConnectionError(
            "refused"
        )

        pool = HttpLedgerPool("sovrin", "https://vdr.example.com", mock_session)
        with pytest.raises(LedgerRequestError):
            await pool.submit_request(GetAttribRequest(target_did="abc", raw="endpoint"))

    @pytest.mark.asyncio
    async def test_submit_request_empty_body(self):
        """Test an empty body is a failed read."""
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 200
        mock_response.json.return_value = None
        mock_session.get.return_value.__aenter__.return_value = mock_response

        pool = HttpLedgerPool("sovrin", "https://vdr.example.com", mock_session)
        with pytest.raises(LedgerRequestError):
            await pool.submit_request(GetNymRequest(dest="abc"))


class TestReadNym:
    """Test suite for NYM reads."""

    @pytest.mark.asyncio
    async def test_read_nym_found(self):
        """Test NYM data is decoded into a record."""
        pool = FakeLedgerPool(nyms={"abc": {"dest": "abc", "verkey": "def", "role": "101"}})
        nym = await read_nym(pool, "abc")
        assert nym.verkey == "def"
        assert nym.role == "101"

    @pytest.mark.asyncio
    async def test_read_nym_missing(self):
        """Test a null data reply means no record."""
        assert await read_nym(FakeLedgerPool(), "abc") is None


class TestLedgerPoolRegistry:
    """Test suite for pool selection."""

    @pytest.mark.asyncio
    async def test_no_pools(self):
        """Test selection fails when no pool is configured."""
        with pytest.raises(LedgerPoolNotConfigured):
            await LedgerPoolRegistry([]).pool_for_did("abc")

    @pytest.mark.asyncio
    async def test_single_pool(self):
        """Test a single pool is read directly."""
        pool = FakeLedgerPool(nyms={"abc": {"verkey": "def"}})
        selected, nym = await LedgerPoolRegistry([pool]).pool_for_did("abc")
        assert selected is pool
        assert nym.verkey == "def"
        assert pool.requested_paths() == ["nym/abc"]

    @pytest.mark.asyncio
    async def test_single_pool_not_found(self):
        """Test a missing record on the only pool is not found."""
        with pytest.raises(DidNotFoundOnLedger):
            await LedgerPoolRegistry([FakeLedgerPool()]).pool_for_did("abc")

    @pytest.mark.asyncio
    async def test_single_pool_error_propagates(self):
        """Test a failing single pool raises its error."""
        pool = FakeLedgerPool(failures={"nym/abc": LedgerRequestError("test", "down")})
        with pytest.raises(LedgerRequestError):
            await LedgerPoolRegistry([pool]).pool_for_did("abc")

    @pytest.mark.asyncio
    async def test_production_pool_preferred(self):
        """Test a production pool wins over an earlier non-production pool."""
        staging = FakeLedgerPool(
            name="staging", nyms={"abc": {"verkey": "staging"}}, is_production=False
        )
        production = FakeLedgerPool(name="production", nyms={"abc": {"verkey": "prod"}})
        selected, nym = await LedgerPoolRegistry([staging, production]).pool_for_did("abc")
        assert selected is production
        assert nym.verkey == "prod"

    @pytest.mark.asyncio
    async def test_configuration_order_within_group(self):
        """Test the first configured pool wins among equals."""
        first = FakeLedgerPool(name="first", nyms={"abc": {"verkey": "one"}})
        second = FakeLedgerPool(name="second", nyms={"abc": {"verkey": "two"}})
        selected, _ = await LedgerPoolRegistry([first, second]).pool_for_did("abc")
        assert selected is first

    @pytest.mark.asyncio
    async def test_failing_pool_skipped(self):
        """Test a pool that errors is skipped when another has the record."""
        broken = FakeLedgerPool(
            name="broken", failures={"nym/abc": LedgerRequestError("broken", "down")}
        )
        staging = FakeLedgerPool(
            name="staging", nyms={"abc": {"verkey": "staging"}}, is_production=False
        )
        selected, _ = await LedgerPoolRegistry([broken, staging]).pool_for_did("abc")
        assert selected is staging

    @pytest.mark.asyncio
    async def test_not_found_on_any_pool(self):
        """Test selection fails when no pool has the record."""
        registry = LedgerPoolRegistry([FakeLedgerPool(name="a"), FakeLedgerPool(name="b")])
        with pytest.raises(DidNotFoundOnLedger):
            await registry.pool_for_did("abc")
