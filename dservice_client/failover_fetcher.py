"""FailoverFetcher — sequential HTTP failover across dservice endpoints.

Requests go to one endpoint at a time, in the fixed order handed over at
construction.  Every response is classified by a single policy:

    2xx / 3xx    →  SUCCESS          return the response
    4xx          →  CLIENT_ERROR     raise ``ClientError``, no failover
    5xx          →  TRANSIENT_ERROR  warn, try the next endpoint
    no response  →  TRANSIENT_ERROR  warn, try the next endpoint

Exhausting the list raises ``AllEndpointsFailedError`` regardless of
whether the final failure was a 5xx or a transport error.  Running out
of the overall time budget raises ``FetchTimeoutError`` instead.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import httpx

from dservice_client.core.errors import (
    AllEndpointsFailedError,
    ClientError,
    FetchTimeoutError,
    NoEndpointsError,
    TransientEndpointError,
)

logger = logging.getLogger(__name__)


class AttemptOutcome(str, Enum):
    """Classification of a single request attempt."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class RequestAttempt:
    """Record of one endpoint attempt.

    Attributes:
        endpoint:    Base URL that was tried.
        outcome:     How the attempt was classified.
        status_code: HTTP status, ``None`` on transport failure.
    """

    endpoint: str
    outcome: AttemptOutcome
    status_code: int | None = None


def classify_status(status_code: int) -> AttemptOutcome:
    """Map an HTTP status code onto the failover policy."""
    if 200 <= status_code < 400:
        return AttemptOutcome.SUCCESS
    if 400 <= status_code < 500:
        return AttemptOutcome.CLIENT_ERROR
    # 1xx never reaches us from httpx; anything else is the backend's fault
    return AttemptOutcome.TRANSIENT_ERROR


class FailoverFetcher:
    """Issues requests against a finalized endpoint list.

    Args:
        client:          Shared ``httpx.AsyncClient`` used for every endpoint.
        endpoints:       Finalized base URLs; order is attempt order.
        attempt_timeout: Default per-attempt transport timeout in seconds.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoints: Sequence[str],
        *,
        attempt_timeout: float = 30.0,
    ) -> None:
        self._client = client
        self.endpoints: tuple[str, ...] = tuple(endpoints)
        self._attempt_timeout = attempt_timeout

    async def fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        timeout: float | None = None,
        **request_kwargs,
    ) -> httpx.Response:
        """Request *path* from each endpoint in turn until one answers.

        Args:
            path:    Appended verbatim to each endpoint base URL.
            method:  HTTP method.
            timeout: Overall budget in seconds across all attempts, enforced
                     around each whole attempt.  httpx also gets
                     ``min(remaining, attempt_timeout)`` per phase.
            **request_kwargs: Passed to ``httpx.AsyncClient.request``
                     (``headers``, ``params``, ``json``, ``content``...).

        Returns:
            The first response with a status in ``[200, 400)``.

        Raises:
            NoEndpointsError: The endpoint list is empty.
            ClientError: An endpoint answered with a 4xx.
            AllEndpointsFailedError: Every endpoint failed transiently.
            FetchTimeoutError: The overall budget ran out.
        """
        if not self.endpoints:
            raise NoEndpointsError()

        started = time.monotonic()
        attempts: list[RequestAttempt] = []
        last_error: TransientEndpointError | None = None
        last_response: httpx.Response | None = None

        for index, endpoint in enumerate(self.endpoints):
            remaining: float | None = None
            attempt_timeout = self._attempt_timeout
            if timeout is not None:
                remaining = timeout - (time.monotonic() - started)
                if remaining <= 0:
                    raise FetchTimeoutError(path, timeout) from last_error
                attempt_timeout = min(remaining, attempt_timeout)

            url = f"{endpoint}{path}"
            request = self._client.request(method, url, timeout=attempt_timeout, **request_kwargs)
            try:
                # httpx timeouts apply per phase; wait_for bounds the whole attempt
                response = await asyncio.wait_for(request, remaining)
            except asyncio.TimeoutError:
                attempts.append(RequestAttempt(endpoint, AttemptOutcome.TRANSIENT_ERROR))
                self._log_failure(endpoint, "time budget spent", index)
                raise FetchTimeoutError(path, timeout) from last_error
            except httpx.RequestError as exc:
                # No usable response: transport, redirect loop or decoding failure
                last_error = TransientEndpointError(endpoint, str(exc) or type(exc).__name__)
                last_error.__cause__ = exc
                attempts.append(RequestAttempt(endpoint, AttemptOutcome.TRANSIENT_ERROR))
                self._log_failure(endpoint, last_error.detail, index)
                if timeout is not None and time.monotonic() - started >= timeout:
                    raise FetchTimeoutError(path, timeout) from last_error
                continue

            outcome = classify_status(response.status_code)
            attempts.append(RequestAttempt(endpoint, outcome, response.status_code))

            if outcome is AttemptOutcome.SUCCESS:
                return response
            if outcome is AttemptOutcome.CLIENT_ERROR:
                raise ClientError(response.status_code, response.reason_phrase, response)

            last_response = response
            last_error = TransientEndpointError(
                endpoint,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
            self._log_failure(endpoint, last_error.detail, index)

        raise AllEndpointsFailedError(path, attempts, last_error, last_response) from last_error

    def _log_failure(self, endpoint: str, detail: str, index: int) -> None:
        if index < len(self.endpoints) - 1:
            logger.warning("Endpoint %s failed (%s), trying next endpoint...", endpoint, detail)
        else:
            logger.warning("Endpoint %s failed (%s), no endpoints left", endpoint, detail)
