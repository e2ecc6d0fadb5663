"""Rotation planning for the wheel.

Segment ``i`` spans ``[i * slice, (i + 1) * slice)`` degrees clockwise
from the top of the unrotated wheel. The pointer is fixed at screen
angle 0. Rotating the wheel clockwise by ``R`` degrees moves an
unrotated angle ``a`` to screen angle ``(a + R) mod 360``.
"""

from __future__ import annotations
import math
from typing import List
from pipeline.prize_wheel.types import Segment


FULL_TURN = 360.0


def slice_angle(item_count: int) -> float:
    """Angular span of one segment in degrees."""
    if item_count <= 0:
        raise ValueError("item_count must be positive.")
    return FULL_TURN / item_count


def segment_layout(item_count: int) -> List[Segment]:
    """
    Describe every segment of an unrotated wheel.

    Args:
        item_count: Number of items on the wheel

    Returns:
        One Segment per item, in index order (empty for an empty wheel)
    """
    if item_count <= 0:
        return []

    span = slice_angle(item_count)
    return [
        Segment(
            index=index,
            start=index * span,
            center=index * span + span / 2,
            end=(index + 1) * span,
        )
        for index in range(item_count)
    ]


def next_rotation(
    current_rotation: float,
    item_count: int,
    winning_index: int,
    extra_full_spins: int,
) -> float:
    """
    Compute the next cumulative rotation that lands the winner under the pointer.

    The result only ever moves forward: it adds ``extra_full_spins`` whole
    turns (cosmetic) plus the forward distance, in [0, 360), from the
    current orientation to the one that centres the winning segment at
    the top.

    Args:
        current_rotation: Current cumulative rotation in degrees
        item_count: Number of items on the wheel
        winning_index: Index of the selected item
        extra_full_spins: Whole turns added before landing

    Returns:
        New cumulative rotation in degrees (>= current_rotation)

    Raises:
        ValueError: If item_count or winning_index are out of range
    """
    if item_count <= 0:
        raise ValueError("item_count must be positive.")
    if not 0 <= winning_index < item_count:
        raise ValueError(f"winning_index {winning_index} out of range for {item_count} items.")

    span = slice_angle(item_count)
    center = winning_index * span + span / 2

    target_normalized = (FULL_TURN - center) % FULL_TURN
    current_normalized = current_rotation % FULL_TURN

    delta = target_normalized - current_normalized
    if delta < 0:
        delta += FULL_TURN

    return current_rotation + FULL_TURN * extra_full_spins + delta


def segment_at_pointer(rotation: float, item_count: int) -> int:
    """
    Find which segment sits under the pointer for a given rotation.

    Args:
        rotation: Cumulative clockwise rotation in degrees
        item_count: Number of items on the wheel

    Returns:
        Index of the segment under the pointer
    """
    span = slice_angle(item_count)
    unrotated = (-rotation) % FULL_TURN
    index = int(math.floor(unrotated / span))
    # unrotated can round up to exactly 360.0
    return min(index, item_count - 1)
