from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

from backend.observability import InMemoryMetricsStore, render_prometheus_metrics


def test_snapshot_tracks_spin_events():
    metrics = InMemoryMetricsStore()

    metrics.increment_spin_started()
    metrics.increment_spin_started()
    metrics.increment_spin_refused("too_few_items")
    metrics.increment_spin_refused("")
    metrics.increment_outcome("Yes")
    metrics.increment_store_failure("items", "write")

    snapshot = metrics.snapshot()
    assert snapshot["spinsStarted"] == 2
    assert snapshot["spinsRefused"] == {"too_few_items": 1, "unknown": 1}
    assert snapshot["outcomes"] == {"Yes": 1}
    assert snapshot["storeFailures"] == {"items": {"write": 1}}

    metrics.reset()
    assert metrics.snapshot()["spinsStarted"] == 0


def test_prometheus_rendering_escapes_labels():
    metrics = InMemoryMetricsStore()
    metrics.increment_outcome('Say "hi"')
    metrics.increment_store_failure("history", "delete")

    text = render_prometheus_metrics(metrics.snapshot())

    assert "# TYPE prize_wheel_spins_started_total counter" in text
    assert "prize_wheel_spins_started_total 0" in text
    assert 'prize_wheel_outcomes_total{label="Say \\"hi\\""} 1' in text
    assert 'prize_wheel_store_failures_total{key="history",operation="delete"} 1' in text
    assert text.endswith("\n")
