"""Base telemetry port protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TelemetryPort(Protocol):
    """Protocol for telemetry backends used by the chain executor.

    - Counters: runs, handler invocations, contract violations, failures
    - Timing: wall-clock duration of one chain run
    """

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter by ``value`` with optional labels.

        Args:
            name: Metric name (e.g., "chain_runs_total")
            value: Amount to increment (default 1)
            labels: Optional label tuples (e.g., (("outcome", "ok"),))
        """

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Record timing of an operation in seconds.

        Args:
            name: Metric name (e.g., "chain_run_duration_seconds")
            value: Duration in seconds
            labels: Optional label tuples
        """
