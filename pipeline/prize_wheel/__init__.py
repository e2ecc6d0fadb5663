"""
Prize wheel engine.

Weighted random selection over a mutable item list, forward-only rotation
planning that lands the winner under a fixed pointer, and a spin session
that settles after a fixed duration into a bounded outcome history.
"""

from pipeline.prize_wheel.types import DEFAULT_ITEMS, PALETTE, Item, Segment, SpinOutcome, SpinState
from pipeline.prize_wheel.selection import RandomSource, select_item, total_weight
from pipeline.prize_wheel.rotation import next_rotation, segment_at_pointer, segment_layout
from pipeline.prize_wheel.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from pipeline.prize_wheel.persistence import KeyValueStore
from pipeline.prize_wheel.registry import ItemRegistry
from pipeline.prize_wheel.history import HistoryLog
from pipeline.prize_wheel.session import SpinSession

__all__ = [
    "DEFAULT_ITEMS",
    "PALETTE",
    "Item",
    "Segment",
    "SpinOutcome",
    "SpinState",
    "RandomSource",
    "select_item",
    "total_weight",
    "next_rotation",
    "segment_at_pointer",
    "segment_layout",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "KeyValueStore",
    "ItemRegistry",
    "HistoryLog",
    "SpinSession",
]
