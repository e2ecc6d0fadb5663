from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any


class InMemoryMetricsStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._spins_started = 0
        self._spins_refused: dict[str, int] = defaultdict(int)
        self._outcomes: dict[str, int] = defaultdict(int)
        self._store_failures: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))

    def reset(self) -> None:
        with self._lock:
            self._spins_started = 0
            self._spins_refused.clear()
            self._outcomes.clear()
            self._store_failures.clear()

    def increment_spin_started(self) -> None:
        with self._lock:
            self._spins_started += 1

    def increment_spin_refused(self, reason: str) -> None:
        normalized = (reason or "unknown").strip() or "unknown"
        with self._lock:
            self._spins_refused[normalized] += 1

    def increment_outcome(self, label: str) -> None:
        normalized = (label or "unknown").strip() or "unknown"
        with self._lock:
            self._outcomes[normalized] += 1

    def increment_store_failure(self, key: str, operation: str) -> None:
        with self._lock:
            self._store_failures[key][operation] += 1

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "spinsStarted": self._spins_started,
                "spinsRefused": dict(self._spins_refused),
                "outcomes": dict(self._outcomes),
                "storeFailures": {key: dict(value) for key, value in self._store_failures.items()},
            }


def _escape_label(value: str) -> str:
    return value.replace("\\", r"\\").replace('"', r'\"')


def render_prometheus_metrics(snapshot: dict[str, Any]) -> str:
    lines: list[str] = []

    lines.append("# HELP prize_wheel_spins_started_total Total spins started.")
    lines.append("# TYPE prize_wheel_spins_started_total counter")
    lines.append(f"prize_wheel_spins_started_total {int(snapshot.get('spinsStarted') or 0)}")

    lines.append("# HELP prize_wheel_spins_refused_total Spin requests ignored, by reason.")
    lines.append("# TYPE prize_wheel_spins_refused_total counter")
    for reason, count in sorted((snapshot.get("spinsRefused") or {}).items()):
        lines.append(f'prize_wheel_spins_refused_total{{reason="{_escape_label(str(reason))}"}} {int(count)}')

    lines.append("# HELP prize_wheel_outcomes_total Settled spins by winning label.")
    lines.append("# TYPE prize_wheel_outcomes_total counter")
    for label, count in sorted((snapshot.get("outcomes") or {}).items()):
        lines.append(f'prize_wheel_outcomes_total{{label="{_escape_label(str(label))}"}} {int(count)}')

    lines.append("# HELP prize_wheel_store_failures_total Failed persistence operations.")
    lines.append("# TYPE prize_wheel_store_failures_total counter")
    for key, operations in sorted((snapshot.get("storeFailures") or {}).items()):
        for operation, count in sorted((operations or {}).items()):
            lines.append(
                "prize_wheel_store_failures_total"
                f'{{key="{_escape_label(str(key))}",operation="{_escape_label(str(operation))}"}} {int(count)}'
            )

    return "\n".join(lines) + "\n"


METRICS = InMemoryMetricsStore()
