"""EndpointDiscovery — resolve the backend endpoints for a domain.

Endpoints come either from a static override supplied at construction, or
from the ``dservice`` text record published on the domain's ENS resolver.
The record holds newline-delimited base URLs.

The on-chain lookup itself is an injected collaborator with the signature::

    async def lookup(resolver_client, domain, resolver_address, key) -> TextRecord
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from dservice_client.core.config import Settings
from dservice_client.core.errors import ServiceDiscoveryError
from dservice_client.models.schemas import ServiceIdentity

logger = logging.getLogger(__name__)

DSERVICE_TEXT_KEY = "dservice"


@dataclass(frozen=True)
class TextRecord:
    """Result of a text-record lookup.

    Attributes:
        resolver_address: Resolver registered for the domain, ``None`` if none.
        value:            Text value under the requested key, ``None`` if unset.
    """

    resolver_address: str | None
    value: str | None = None


TextRecordLookup = Callable[[Any, str, str, str], Awaitable[TextRecord]]


def parse_endpoint_record(value: str) -> list[str]:
    """Split a text record into URLs, trimming whitespace and dropping blanks.

    Duplicates are kept as published.
    """
    return [line.strip() for line in value.split("\n") if line.strip()]


def normalize_endpoint_url(value: str) -> str:
    """Prefix ``https://`` onto a manually entered endpoint lacking a scheme."""
    value = value.strip()
    if value.startswith(("http://", "https://")):
        return value
    return f"https://{value}"


class EndpointDiscovery:
    """Resolves the candidate endpoint list for one ``ServiceIdentity``.

    Args:
        identity: Domain and optional static override.
        lookup:   Text-record lookup collaborator.  Only required when no
                  static override is set.
        settings: Supplies the chain-id → universal resolver table.
    """

    def __init__(
        self,
        identity: ServiceIdentity,
        lookup: TextRecordLookup | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.identity = identity
        self._lookup = lookup
        self._settings = settings or Settings()

    async def resolve(
        self,
        resolver_client: Any,
        *,
        chain_id: int | None = None,
        resolver_override: str | None = None,
    ) -> list[str]:
        """Return the unshuffled endpoint list for the domain.

        A static override always wins; the lookup is not invoked and the
        chain is never queried.

        Raises:
            ServiceDiscoveryError: No resolver, no record, or no URLs in it.
        """
        domain = self.identity.domain
        if self.identity.static_override:
            logger.debug("Using static dservice endpoint for %s, skipping discovery", domain)
            return [self.identity.static_override]

        if self._lookup is None:
            raise ServiceDiscoveryError(domain, "no text record lookup configured")

        resolver_address = await self._resolver_address(resolver_client, chain_id, resolver_override)
        record = await self._lookup(
            resolver_client,
            domain,
            resolver_address,
            DSERVICE_TEXT_KEY,
        )

        if not record.resolver_address:
            raise ServiceDiscoveryError(domain, "no resolver registered")
        if not record.value:
            raise ServiceDiscoveryError(domain, f"empty '{DSERVICE_TEXT_KEY}' text record")

        endpoints = parse_endpoint_record(record.value)
        if not endpoints:
            raise ServiceDiscoveryError(domain, "text record lists no URLs")

        logger.info("Discovered %d dservice endpoint(s) for %s", len(endpoints), domain)
        return endpoints

    async def _resolver_address(
        self,
        resolver_client: Any,
        chain_id: int | None,
        resolver_override: str | None,
    ) -> str:
        """Pick the universal resolver: explicit override, else by chain id."""
        resolver_override = resolver_override or self._settings.RESOLVER_OVERRIDE
        if resolver_override:
            return resolver_override
        if chain_id is None:
            chain_id = self._settings.CHAIN_ID
        if chain_id is None:
            chain_id = await resolver_client.get_chain_id()
        address = self._settings.UNIVERSAL_RESOLVERS.get(chain_id)
        if not address:
            raise ServiceDiscoveryError(
                self.identity.domain,
                f"no universal resolver configured for chain {chain_id}",
            )
        return address
