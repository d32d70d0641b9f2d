"""Discover a domain's dservice endpoints and fetch from them.

Construct one client per domain at application startup and pass it to the
code that needs it.  ``fetch()`` may be called straight away; it waits on the
readiness gate until ``init()`` has discovered and shuffled the endpoints,
and re-raises the discovery error if ``init()`` failed.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

import httpx

from dservice_client.core.config import Settings
from dservice_client.core.errors import ServiceDiscoveryError
from dservice_client.discovery import EndpointDiscovery, TextRecordLookup, normalize_endpoint_url
from dservice_client.failover_fetcher import FailoverFetcher
from dservice_client.models.schemas import ServiceIdentity
from dservice_client.resilience.readiness import ReadinessGate, ReadinessState

logger = logging.getLogger(__name__)


class DServiceClient:
    """Resilient fetch client for a dservice-backed domain.

    Args:
        domain:       Domain whose ``dservice`` text record lists the endpoints.
        api_endpoint: Static endpoint override; disables on-chain discovery.
        lookup:       Text-record lookup collaborator.
        http_client:  Shared ``httpx.AsyncClient``.  Created (and owned) by the
                      client when not given.
        settings:     Client settings; defaults are read from the environment.
        rng:          Random source used for the one-time endpoint shuffle.
    """

    def __init__(
        self,
        domain: str,
        api_endpoint: str | None = None,
        *,
        lookup: TextRecordLookup | None = None,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or Settings()
        if api_endpoint and api_endpoint.strip():
            api_endpoint = normalize_endpoint_url(api_endpoint)
        self.identity = ServiceIdentity(domain=domain, static_override=api_endpoint)
        self._discovery = EndpointDiscovery(self.identity, lookup, self._settings)
        self._gate = ReadinessGate()
        self._rng = rng or random.Random()
        self._fetcher: FailoverFetcher | None = None

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            follow_redirects=self._settings.FOLLOW_REDIRECTS,
        )

    @classmethod
    def from_settings(cls, domain: str, settings: Settings | None = None, **kwargs: Any) -> "DServiceClient":
        """Build a client whose static override comes from ``API_ENDPOINT``."""
        settings = settings or Settings()
        return cls(domain, settings.API_ENDPOINT, settings=settings, **kwargs)

    @property
    def domain(self) -> str:
        return self.identity.domain

    @property
    def state(self) -> ReadinessState:
        return self._gate.state

    @property
    def endpoints(self) -> tuple[str, ...]:
        """Finalized endpoint order; empty until ``init()`` succeeds."""
        if self._fetcher is None:
            return ()
        return self._fetcher.endpoints

    async def init(
        self,
        resolver_client: Any = None,
        *,
        chain_id: int | None = None,
        resolver_override: str | None = None,
    ) -> tuple[str, ...]:
        """Discover and shuffle the endpoints, then open the readiness gate.

        Discovery runs at most once.  Later or concurrent calls wait for the
        first call's outcome and return (or raise) the same thing.

        Raises:
            ServiceDiscoveryError: No endpoints could be discovered.
        """
        if self._gate.state != ReadinessState.UNINITIALIZED:
            return await self._gate.wait()
        self._gate.begin()

        try:
            endpoints = await self._discovery.resolve(
                resolver_client,
                chain_id=chain_id,
                resolver_override=resolver_override,
            )
            if not endpoints:
                raise ServiceDiscoveryError(self.domain)
        except asyncio.CancelledError:
            self._gate.set_failed(ServiceDiscoveryError(self.domain, "discovery cancelled"))
            raise
        except Exception as exc:
            logger.warning("dservice discovery failed for %s: %s", self.domain, exc)
            self._gate.set_failed(exc)
            raise

        shuffled = list(endpoints)
        self._rng.shuffle(shuffled)
        self._fetcher = FailoverFetcher(
            self._client,
            shuffled,
            attempt_timeout=self._settings.REQUEST_TIMEOUT_SECONDS,
        )
        self._gate.set_ready(self._fetcher.endpoints)
        return self._fetcher.endpoints

    async def fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        timeout: float | None = None,
        **request_kwargs: Any,
    ) -> httpx.Response:
        """Fetch *path* from the dservice, failing over across endpoints.

        Waits for ``init()`` first.  See ``FailoverFetcher.fetch`` for the
        failover policy and the errors raised.
        """
        await self._gate.wait()
        return await self._fetcher.fetch(path, method=method, timeout=timeout, **request_kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DServiceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
