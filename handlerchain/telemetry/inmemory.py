"""In-memory telemetry backend for tests and the CLI."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field


@dataclass
class InMemoryTelemetry:
    """Stores every metric in memory for inspection."""

    counters: dict[str, Counter] = field(default_factory=lambda: defaultdict(Counter))
    timings: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        key = self._make_key(name, labels)
        self.counters[key][name] += value

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        key = self._make_key(name, labels)
        self.timings[key].append(value)

    def _make_key(self, name: str, labels: tuple[tuple[str, str], ...] | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    # ── Test helpers ─────────────────────────────────────────────────────

    def get_counter(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> int:
        key = self._make_key(name, labels)
        return int(self.counters[key][name])

    def get_timing_values(self, name: str, labels: tuple[tuple[str, str], ...] = ()) -> list[float]:
        key = self._make_key(name, labels)
        return list(self.timings[key])

    def snapshot(self) -> dict[str, int]:
        """Flatten counters into ``{key: value}`` for display."""
        return {key: sum(counter.values()) for key, counter in sorted(self.counters.items())}

    def reset(self) -> None:
        self.counters.clear()
        self.timings.clear()
