"""One-shot readiness gate for deferred initialization.

The gate moves through::

    UNINITIALIZED  →  (begin)        →  INITIALIZING
    INITIALIZING   →  (set_ready)    →  READY
    INITIALIZING   →  (set_failed)   →  FAILED

``READY`` and ``FAILED`` are terminal.  Every waiter observes the same
outcome: the finalized endpoint tuple, or the discovery error re-raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import Enum


class ReadinessState(str, Enum):
    """Readiness gate states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class ReadinessGate:
    """Single-assignment signal carrying an endpoint tuple or an error.

    ``wait()`` may be awaited before ``begin()`` is ever called; it simply
    blocks until the gate is resolved.
    """

    def __init__(self) -> None:
        self._state = ReadinessState.UNINITIALIZED
        self._event = asyncio.Event()
        self._endpoints: tuple[str, ...] = ()
        self._error: BaseException | None = None

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return self._state in (ReadinessState.READY, ReadinessState.FAILED)

    def begin(self) -> None:
        """Mark discovery as started.  Only valid from ``UNINITIALIZED``."""
        if self._state != ReadinessState.UNINITIALIZED:
            raise asyncio.InvalidStateError(f"Readiness gate already {self._state.value}")
        self._state = ReadinessState.INITIALIZING

    def set_ready(self, endpoints: Sequence[str]) -> None:
        self._resolve_check()
        self._endpoints = tuple(endpoints)
        self._state = ReadinessState.READY
        self._event.set()

    def set_failed(self, error: BaseException) -> None:
        self._resolve_check()
        self._error = error
        self._state = ReadinessState.FAILED
        self._event.set()

    def _resolve_check(self) -> None:
        if self.is_resolved:
            raise asyncio.InvalidStateError(f"Readiness gate already {self._state.value}")

    async def wait(self) -> tuple[str, ...]:
        """Block until resolved; return the endpoints or raise the stored error."""
        await self._event.wait()
        if self._error is not None:
            # Shared instance; drop frames from earlier raises
            raise self._error.with_traceback(None)
        return self._endpoints
