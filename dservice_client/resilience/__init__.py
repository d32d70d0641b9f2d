"""Resilience patterns — deferred readiness for endpoint discovery.

Provides the one-shot ``ReadinessGate`` that lets requests be issued
before discovery finishes and surfaces a failed discovery to every waiter.
"""

from dservice_client.resilience.readiness import (
    ReadinessGate,
    ReadinessState,
)

__all__ = [
    "ReadinessGate",
    "ReadinessState",
]
