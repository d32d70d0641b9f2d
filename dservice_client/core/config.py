"""Settings for the dservice client.

Centralized configuration loaded from environment variables with the
``DSERVICE_`` prefix.  Every field has a typed default so the client can be
built without any environment at all.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

# ENS Universal Resolver deployments, keyed by chain id.
DEFAULT_UNIVERSAL_RESOLVERS: dict[int, str] = {
    1: "0xce01f8eee7E479C928F8919abD53E553a36CeF67",  # Ethereum mainnet
    11155111: "0xc8Af999e38273D658BE1b921b88A9Ddf005769cC",  # Sepolia
}


class Settings(BaseSettings):
    """DService client configuration.

    All fields can be overridden by environment variables prefixed with
    ``DSERVICE_``.  For example, ``DSERVICE_API_ENDPOINT=https://api.example``
    pins the client to a single backend and skips on-chain discovery.
    """

    # ── Discovery ───────────────────────────────────────────────────
    API_ENDPOINT: str | None = None  # Static override, skips discovery
    CHAIN_ID: int | None = None  # Queried from the resolver client when unset
    RESOLVER_OVERRIDE: str | None = None  # Explicit universal resolver address
    UNIVERSAL_RESOLVERS: dict[int, str] = Field(
        default_factory=lambda: dict(DEFAULT_UNIVERSAL_RESOLVERS),
    )

    # ── HTTP ────────────────────────────────────────────────────────
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)  # Per attempt
    FOLLOW_REDIRECTS: bool = False

    model_config = {
        "env_prefix": "DSERVICE_",
    }
