"""Telemetry backends for notifyy observability.

Provides both in-memory (for testing) and Prometheus (for production) backends.
"""

from notifyy.telemetry.base import TelemetryPort
from notifyy.telemetry.inmemory import InMemoryTelemetry
from notifyy.telemetry.prometheus import PrometheusTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
    "PrometheusTelemetry",
]
