"""
Configuration Module for the DID Resolution Service

This module defines the configuration system for the resolution service, using
Pydantic for settings validation and dependency injection through AppKeys.

The configuration follows these principles:
1. Environment-based configuration with sensible defaults
2. Strong validation and typing through Pydantic
3. Dependency injection pattern using aiohttp's app context
4. No module-level mutable state: shared handles live in a ResolverContext

The Settings class serves as the central configuration point, loaded from
environment variables with defaults suitable for development environments.
``build_resolver`` and ``build_context`` turn settings into the resolver
stack and the per-process resolution context.

Key configuration areas include:
- Service identification and networking
- Enabled DID methods and their upstreams (PLC directory, ledger pools)
- Redirect chase bounds and timeouts
- Monitoring and error reporting
"""

import json
from typing import Annotated, Final, List, Optional
import logging
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode
from aiohttp import web
from aiohttp import ClientSession

from social.graze.didroute.ledger.pool import HttpLedgerPool, LedgerPoolRegistry
from social.graze.didroute.resolve.base import MethodResolver, ResolverContext
from social.graze.didroute.resolve.cheqd import CheqdDidResolver
from social.graze.didroute.resolve.dispatcher import ResolverDispatcher
from social.graze.didroute.resolve.jwk import JwkDidResolver
from social.graze.didroute.resolve.key import KeyDidResolver
from social.graze.didroute.resolve.plc import PlcDidResolver
from social.graze.didroute.resolve.redirect import RedirectingResolver
from social.graze.didroute.resolve.sov import SovLedgerResolver
from social.graze.didroute.resolve.web import WebDidResolver


logger = logging.getLogger(__name__)


class LedgerPoolConfig(BaseModel):
    """A ledger pool reachable through an HTTP read gateway."""

    name: str
    url: str
    is_production: bool = True


class Settings(BaseSettings):
    """
    Application settings for the resolution service.

    Environment variables are automatically mapped to settings fields. For
    example ``MAX_REDIRECT_HOPS=4`` lowers the redirect bound and
    ``LEDGER_POOLS='[{"name": "sovrin", "url": "https://vdr.example"}]'``
    configures the ledger pools used for did:sov.
    """

    # Environment and debugging settings
    debug: bool = False
    """
    Enable debug mode for verbose logging and detailed error responses.
    Set with DEBUG=true environment variable.
    """

    # Network and service identification settings
    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    # Monitoring and error reporting
    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    # DID methods
    enabled_methods: Annotated[List[str], NoDecode] = [
        "key",
        "jwk",
        "web",
        "plc",
        "sov",
        "cheqd",
    ]
    """
    DID methods to register with the dispatcher.
    Set with ENABLED_METHODS environment variable as comma-separated values.
    """

    plc_hostname: str = "plc.directory"
    """
    Hostname for the PLC directory service for did:plc resolution.
    Set with PLC_HOSTNAME environment variable.
    """

    did_web_scheme: str = "https"
    """
    URL scheme used to fetch did:web documents. Only use http for local testing.
    Set with DID_WEB_SCHEME environment variable.
    """

    cheqd_resolver_url: str = "https://resolver.cheqd.net"
    """
    Base URL of the DID resolver service used for did:cheqd resolution.
    Set with CHEQD_RESOLVER_URL environment variable.
    """

    ledger_pools: List[LedgerPoolConfig] = list()
    """
    Ledger pools used for did:sov resolution, as a JSON list of
    {"name", "url", "is_production"} objects.
    Set with LEDGER_POOLS environment variable.
    """

    ledger_request_timeout: float = 10.0
    """
    Total seconds allowed for a single ledger read.
    Set with LEDGER_REQUEST_TIMEOUT environment variable.
    """

    # Redirect chase settings
    max_redirect_hops: int = 8
    """
    Maximum number of deactivation redirects followed in one resolution.
    Set with MAX_REDIRECT_HOPS environment variable.
    """

    hop_timeout: Optional[float] = 30.0
    """
    Seconds allowed for each resolution hop. Expiry is a transient failure.
    Set with HOP_TIMEOUT environment variable.
    """

    @field_validator("enabled_methods", mode="before")
    @classmethod
    def decode_enabled_methods(cls, v) -> List[str]:
        """
        Accept either a list of method names or a comma-separated string.

        Raises:
            ValueError: If the input is neither a list nor a string
        """
        if isinstance(v, list):
            return v
        elif isinstance(v, str):
            return [method.strip() for method in v.split(",") if method.strip()]
        raise ValueError("enabled_methods must be a list or a comma-separated string")

    @field_validator("ledger_pools", mode="before")
    @classmethod
    def decode_ledger_pools(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v.strip() else []
        return v


METHOD_RESOLVERS: Final = ("key", "jwk", "web", "plc", "sov", "cheqd")


def build_method_resolvers(settings: Settings) -> List[MethodResolver]:
    resolvers: List[MethodResolver] = []
    for method in settings.enabled_methods:
        if method == "key":
            resolvers.append(KeyDidResolver())
        elif method == "web":
            resolvers.append(WebDidResolver(scheme=settings.did_web_scheme))
        elif method == "plc":
            resolvers.append(PlcDidResolver(plc_hostname=settings.plc_hostname))
        elif method == "jwk":
            resolvers.append(JwkDidResolver())
        elif method == "sov":
            resolvers.append(SovLedgerResolver())
        elif method == "cheqd":
            resolvers.append(CheqdDidResolver(resolver_url=settings.cheqd_resolver_url))
        else:
            raise ValueError(
                f"Unknown DID method '{method}', expected one of {', '.join(METHOD_RESOLVERS)}"
            )
    return resolvers


def build_resolver(settings: Settings) -> RedirectingResolver:
    """Build the dispatcher and redirect-chasing resolver from settings."""
    dispatcher = ResolverDispatcher(build_method_resolvers(settings))
    logger.info("Registered DID methods: %s", ", ".join(dispatcher.supported_methods))
    return RedirectingResolver(
        dispatcher,
        max_hops=settings.max_redirect_hops,
        hop_timeout=settings.hop_timeout,
    )


def build_context(settings: Settings, session: ClientSession) -> ResolverContext:
    """Build the resolution context around a shared HTTP client session."""
    pools = [
        HttpLedgerPool(
            name=pool.name,
            url=pool.url,
            session=session,
            is_production=pool.is_production,
            timeout=settings.ledger_request_timeout,
        )
        for pool in settings.ledger_pools
    ]
    return ResolverContext(session=session, ledger_pools=LedgerPoolRegistry(pools))


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

SessionAppKey: Final = web.AppKey("http_session", ClientSession)
"""AppKey for accessing the shared aiohttp client session"""

ResolverAppKey: Final = web.AppKey("resolver", RedirectingResolver)
"""AppKey for accessing the redirect-chasing DID resolver"""

ResolverContextAppKey: Final = web.AppKey("resolver_context", ResolverContext)
"""AppKey for accessing the resolution context (session, ledger pools)"""
