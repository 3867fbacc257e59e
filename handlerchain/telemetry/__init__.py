"""Telemetry backends for chain execution metrics."""

from handlerchain.telemetry.base import TelemetryPort
from handlerchain.telemetry.inmemory import InMemoryTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
]
