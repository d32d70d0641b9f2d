"""Error hierarchy and renderer-facing error reports.

Every error raised by the dservice client derives from ``DServiceError``.
``ErrorReport`` turns any of them into a serialisable payload that the
application layer can render to the user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    import httpx


class DServiceError(Exception):
    """Base exception for all dservice client errors."""


class ServiceDiscoveryError(DServiceError):
    """Raised when no endpoints can be discovered for a domain.

    Unrecoverable for the client instance without reconfiguration, e.g.
    supplying a static endpoint override.
    """

    def __init__(self, domain: str, detail: str = "") -> None:
        self.domain = domain
        self.detail = detail
        msg = f"No dservice endpoints found for domain: {domain}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class NoEndpointsError(DServiceError):
    """Raised when a fetch is attempted against an empty endpoint set."""

    def __init__(self) -> None:
        super().__init__("No dservice endpoints available")


class ClientError(DServiceError):
    """Raised on a 4xx response.  Never retried against another endpoint."""

    def __init__(self, status_code: int, reason: str, response: httpx.Response | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        self.response = response
        super().__init__(f"HTTP {status_code}: {reason}")


class TransientEndpointError(DServiceError):
    """A single endpoint failed with a network error or a 5xx response."""

    def __init__(self, endpoint: str, detail: str, status_code: int | None = None) -> None:
        self.endpoint = endpoint
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Endpoint {endpoint} failed: {detail}")


class AllEndpointsFailedError(DServiceError):
    """Raised once every endpoint has failed transiently.

    Attributes:
        path:          Request path that was attempted.
        attempts:      ``RequestAttempt`` records, in attempt order.
        last_error:    The final ``TransientEndpointError``.
        last_response: The final 5xx response, if any endpoint answered.
    """

    def __init__(
        self,
        path: str,
        attempts: list | None = None,
        last_error: TransientEndpointError | None = None,
        last_response: httpx.Response | None = None,
    ) -> None:
        self.path = path
        self.attempts = list(attempts or [])
        self.last_error = last_error
        self.last_response = last_response
        msg = "All dservice endpoints failed"
        if last_error is not None:
            msg += f". Last error: {last_error.detail}"
        super().__init__(msg)


class FetchTimeoutError(DServiceError):
    """Raised when a fetch exhausts its overall time budget."""

    def __init__(self, path: str, timeout_seconds: float) -> None:
        self.path = path
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Fetch of '{path}' timed out after {timeout_seconds}s")


_OVERRIDE_HINT = "Supply a dservice endpoint manually (e.g. DSERVICE_API_ENDPOINT) to bypass discovery."


class ErrorReport(BaseModel):
    """Renderer-facing error payload.

    Returns ``{"error": str, "code": str, "domain": str, "hint": str | None}``,
    with no stack traces.
    """

    error: str
    code: str
    domain: str
    hint: str | None = None

    @classmethod
    def from_exception(cls, exc: Exception, domain: str) -> "ErrorReport":
        """Create from an exception, mapping to machine-readable codes.

        Never leaks internal details for unhandled exceptions.
        """
        if isinstance(exc, ServiceDiscoveryError):
            return cls(error=str(exc), code="SERVICE_DISCOVERY_FAILED", domain=domain, hint=_OVERRIDE_HINT)
        if isinstance(exc, NoEndpointsError):
            return cls(error=str(exc), code="NO_ENDPOINTS", domain=domain, hint=_OVERRIDE_HINT)
        if isinstance(exc, ClientError):
            return cls(error=str(exc), code="CLIENT_ERROR", domain=domain)
        if isinstance(exc, AllEndpointsFailedError):
            return cls(error=str(exc), code="ALL_ENDPOINTS_FAILED", domain=domain, hint=_OVERRIDE_HINT)
        if isinstance(exc, FetchTimeoutError):
            return cls(error=str(exc), code="FETCH_TIMEOUT", domain=domain)
        if isinstance(exc, DServiceError):
            return cls(error=str(exc), code="DSERVICE_ERROR", domain=domain)
        return cls(error="An internal error occurred", code="INTERNAL_ERROR", domain=domain)
