"""Pytest configuration and shared fixtures for the wheel engine tests."""

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from pipeline.prize_wheel.types import Item


class FixedDraw:
    """Returns the same point of [a, b) on every call."""

    def __init__(self, fraction: float) -> None:
        self.fraction = fraction
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return a + (b - a) * self.fraction


@pytest.fixture
def fixed_draw():
    """Factory for deterministic uniform sources."""
    return FixedDraw


@pytest.fixture
def make_items():
    """Factory for items with sequential ids and the given weights."""

    def _make(*weights: float) -> list[Item]:
        return [
            Item(id=i + 1, label=f"item-{i + 1}", color="#000000", weight=w)
            for i, w in enumerate(weights)
        ]

    return _make
