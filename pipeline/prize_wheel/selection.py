"""Weighted random selection over wheel items."""

from __future__ import annotations
import random
from typing import Optional, Protocol, Sequence
from pipeline.prize_wheel.types import Item


class UniformSource(Protocol):
    """Anything that can draw a uniform float, e.g. ``random.Random``."""

    def uniform(self, a: float, b: float) -> float:
        ...


class RandomSource:
    """
    Seedable wrapper over ``random.Random``.

    Passing a seed makes the draw sequence reproducible; ``None`` uses
    system randomness.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def reseed(self, seed: int | None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    def uniform(self, a: float, b: float) -> float:
        # random.uniform can return b through rounding; keep the draw in [a, b)
        return a + (b - a) * self._rng.random()


_DEFAULT_SOURCE = RandomSource()


def total_weight(items: Sequence[Item]) -> float:
    """Sum of item weights."""
    return sum(item.weight for item in items)


def select_item(
    items: Sequence[Item],
    rng: Optional[UniformSource] = None,
) -> Optional[Item]:
    """
    Pick one item with probability proportional to its weight.

    Walks the items in list order, subtracting each weight from a single
    uniform draw in [0, total_weight) until the draw falls inside an
    item's band.

    Args:
        items: Candidate items (list order defines the bands)
        rng: Random source exposing ``uniform(a, b)``; defaults to a
            module-level RandomSource

    Returns:
        The winning item, or None if items is empty
    """
    if not items:
        return None

    source = rng or _DEFAULT_SOURCE
    remaining = source.uniform(0, total_weight(items))

    for item in items:
        if remaining < item.weight:
            return item
        remaining -= item.weight

    # Rounding (or a non-positive weight) exhausted the walk
    return items[-1]
