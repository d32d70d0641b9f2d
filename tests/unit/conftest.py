"""Shared fixtures for dservice client unit tests.

The on-chain lookup collaborator is replaced by ``FakeLookup``, which
serves text records from a dict and records every call.
"""

from __future__ import annotations

import httpx
import pytest

from dservice_client.core.config import Settings
from dservice_client.discovery import TextRecord

RESOLVER_1 = "0x00000000000000000000000000000000000000a1"
UNIVERSAL_RESOLVER = "0x00000000000000000000000000000000000000e1"
TEST_CHAIN_ID = 31337


class FakeLookup:
    """Async text-record lookup backed by ``{(domain, key): TextRecord}``."""

    def __init__(self, records: dict | None = None) -> None:
        self.records = records or {}
        self.calls: list[tuple] = []

    async def __call__(self, resolver_client, domain, resolver_address, key) -> TextRecord:
        self.calls.append((resolver_client, domain, resolver_address, key))
        return self.records.get((domain, key), TextRecord(resolver_address=None))

    def publish(self, domain: str, value: str | None, key: str = "dservice") -> None:
        self.records[(domain, key)] = TextRecord(resolver_address=RESOLVER_1, value=value)


class FakeResolverClient:
    """Stands in for a chain client; only ``get_chain_id`` is consumed."""

    def __init__(self, chain_id: int = TEST_CHAIN_ID) -> None:
        self.chain_id = chain_id
        self.chain_id_calls = 0

    async def get_chain_id(self) -> int:
        self.chain_id_calls += 1
        return self.chain_id


@pytest.fixture
def settings() -> Settings:
    return Settings(
        UNIVERSAL_RESOLVERS={TEST_CHAIN_ID: UNIVERSAL_RESOLVER},
        REQUEST_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def resolver_client() -> FakeResolverClient:
    return FakeResolverClient()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


def make_http_client(handler, recorded: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    """Wrap a ``request -> response`` handler in a MockTransport client."""

    async def _handler(request: httpx.Request) -> httpx.Response:
        if recorded is not None:
            recorded.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))
