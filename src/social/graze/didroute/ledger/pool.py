"""
Ledger pool access.

Only the read side of a ledger is used here: public-key (NYM) reads and raw
attribute (ATTRIB) reads. Each read is one request/response round trip and
its reply carries ``result.data``, a JSON-encoded string or null.

``HttpLedgerPool`` talks to an HTTP read gateway in front of a ledger pool
(indy-vdr-proxy style routes ``/nym/{dest}`` and ``/attrib/{dest}/{raw}``).
Anything implementing ``LedgerPool.submit_request`` can stand in for it.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from aiohttp import ClientError, ClientSession, ClientTimeout
from pydantic import BaseModel, ConfigDict, Field, field_validator

from social.graze.didroute.exceptions import (
    DidNotFoundOnLedger,
    LedgerPoolNotConfigured,
    LedgerRequestError,
)

logger = logging.getLogger(__name__)


class GetNymRequest(BaseModel):
    """Read the public-key record for a DID identifier."""

    dest: str

    def path(self) -> str:
        return f"nym/{quote(self.dest, safe='')}"


class GetAttribRequest(BaseModel):
    """Read a raw attribute record (``alsoKnownAs``, ``endpoint``) for a DID identifier."""

    target_did: str
    raw: str

    def path(self) -> str:
        return f"attrib/{quote(self.target_did, safe='')}/{quote(self.raw, safe='')}"


LedgerReadRequest = Union[GetNymRequest, GetAttribRequest]


class LedgerReplyResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: Optional[str] = None

    @field_validator("data", mode="before")
    @classmethod
    def encode_data(cls, v: Any) -> Optional[str]:
        # Some gateways decode the payload before returning it.
        if v is None or isinstance(v, str):
            return v
        return json.dumps(v)


class LedgerReply(BaseModel):
    model_config = ConfigDict(extra="allow")

    result: LedgerReplyResult


class NymRecord(BaseModel):
    """Public-key record of a DID on the ledger."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    dest: Optional[str] = None
    did: Optional[str] = None
    verkey: Optional[str] = None
    role: Optional[str] = None
    alias: Optional[str] = None
    diddoc_content: Optional[str] = Field(default=None, alias="diddocContent")


class LedgerPool(ABC):
    """A ledger pool instance that answers read requests."""

    name: str
    is_production: bool

    @abstractmethod
    async def submit_request(self, request: LedgerReadRequest) -> LedgerReply: ...


class HttpLedgerPool(LedgerPool):
    """Ledger pool reached through an HTTP read gateway.

    Args:
        name: Namespace of the ledger, used in logs and error messages
        url: Base URL of the read gateway
        session: Shared HTTP client session
        is_production: Whether the pool is a production network
        timeout: Total seconds allowed for one read round trip
    """

    def __init__(
        self,
        name: str,
        url: str,
        session: ClientSession,
        is_production: bool = True,
        timeout: float = 10.0,
    ):
        self.name = name
        self.url = url.rstrip("/")
        self.session = session
        self.is_production = is_production
        self.timeout = timeout

    async def submit_request(self, request: LedgerReadRequest) -> LedgerReply:
        url = f"{self.url}/{request.path()}"
        try:
            async with self.session.get(
                url, timeout=ClientTimeout(total=self.timeout)
            ) as resp:
                if resp.status != 200:
                    raise LedgerRequestError(
                        self.name, f"GET {url} returned status {resp.status}"
                    )
                body = await resp.json(content_type=None)
        except (ClientError, asyncio.TimeoutError) as e:
            raise LedgerRequestError(self.name, f"GET {url}: {e!r}") from e

        if body is None:
            raise LedgerRequestError(self.name, f"GET {url} returned an empty body")
        return LedgerReply.model_validate(body)


async def read_nym(pool: LedgerPool, dest: str) -> Optional[NymRecord]:
    """Read the public-key record for ``dest``; None when the ledger has none."""
    logger.debug("Get NYM for did '%s' from ledger '%s'", dest, pool.name)
    reply = await pool.submit_request(GetNymRequest(dest=dest))
    if not reply.result.data:
        return None
    return NymRecord.model_validate_json(reply.result.data)


class LedgerPoolRegistry:
    """Configured ledger pools and the rule for picking one per DID.

    With several pools the public-key record is read from all of them
    concurrently. Production pools win over non-production pools, and within
    each group configuration order decides. The record read during selection
    is returned with the pool so it is not fetched twice.
    """

    def __init__(self, pools: Sequence[LedgerPool]):
        self._pools: List[LedgerPool] = list(pools)

    @property
    def pools(self) -> List[LedgerPool]:
        return list(self._pools)

    async def pool_for_did(self, dest: str) -> Tuple[LedgerPool, NymRecord]:
        if len(self._pools) == 0:
            raise LedgerPoolNotConfigured("No ledger pools configured")

        if len(self._pools) == 1:
            pool = self._pools[0]
            nym = await read_nym(pool, dest)
            if nym is None:
                raise DidNotFoundOnLedger(dest)
            return pool, nym

        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(self._read_nym_or_none(pool, dest))
                for pool in self._pools
            ]
        found = [
            (pool, task.result())
            for pool, task in zip(self._pools, tasks)
            if task.result() is not None
        ]

        for production in (True, False):
            for pool, nym in found:
                if pool.is_production == production:
                    return pool, nym
        raise DidNotFoundOnLedger(dest)

    async def _read_nym_or_none(
        self, pool: LedgerPool, dest: str
    ) -> Optional[NymRecord]:
        try:
            return await read_nym(pool, dest)
        except Exception as e:
            logger.warning(
                "Error reading NYM for did '%s' from ledger '%s': %s", dest, pool.name, e
            )
            return None
