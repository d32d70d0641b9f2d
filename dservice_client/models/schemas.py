"""Pydantic models shared across the dservice client."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceIdentity(BaseModel):
    """Which service a client talks to.  Immutable once constructed.

    ``static_override`` pins the endpoint set to a single URL and disables
    on-chain discovery.
    """

    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., min_length=1, max_length=255)
    static_override: str | None = None

    @field_validator("domain", mode="before")
    @classmethod
    def strip_domain(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("static_override", mode="before")
    @classmethod
    def blank_override_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v
