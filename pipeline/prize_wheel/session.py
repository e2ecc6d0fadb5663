"""Spin session: selection, rotation and the timed settle."""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Optional
from pipeline.prize_wheel.history import HistoryLog
from pipeline.prize_wheel.registry import ItemRegistry
from pipeline.prize_wheel.rotation import next_rotation, segment_layout
from pipeline.prize_wheel.scheduler import Scheduler
from pipeline.prize_wheel.selection import UniformSource, select_item, total_weight
from pipeline.prize_wheel.types import (
    EXTRA_FULL_SPINS,
    MIN_ITEMS_TO_SPIN,
    SPIN_DURATION_MS,
    SPIN_EASING,
    SpinOutcome,
    SpinState,
)


LOGGER = logging.getLogger("prize_wheel.session")


def _log_event(event: str, **fields: Any) -> None:
    LOGGER.info(event, extra={k: v for k, v in fields.items() if v is not None})


class SpinSession:
    """
    Orchestrates one wheel: Idle -> Spinning -> Idle.

    ``spin`` captures the winner by value, advances the rotation and
    schedules a single settle callback ``spin_duration_ms`` later. While
    spinning, further spins, resets and item removals are refused, so at
    most one settle is ever pending.
    """

    def __init__(
        self,
        registry: ItemRegistry,
        history: HistoryLog,
        scheduler: Scheduler,
        *,
        rng: Optional[UniformSource] = None,
        spin_duration_ms: int = SPIN_DURATION_MS,
        extra_full_spins: int = EXTRA_FULL_SPINS,
        min_items: int = MIN_ITEMS_TO_SPIN,
        on_settle: Optional[Callable[[SpinOutcome], None]] = None,
    ) -> None:
        self.registry = registry
        self.history = history
        self._scheduler = scheduler
        self._rng = rng
        self.spin_duration_ms = spin_duration_ms
        self.extra_full_spins = extra_full_spins
        self.min_items = min_items
        self._on_settle = on_settle
        self._state = SpinState()
        self.last_refusal: Optional[str] = None

    @property
    def state(self) -> SpinState:
        return self._state

    @property
    def is_spinning(self) -> bool:
        return self._state.is_spinning

    @property
    def can_spin(self) -> bool:
        return self._refusal_reason() is None

    def _refusal_reason(self) -> Optional[str]:
        items = self.registry.items
        if self._state.is_spinning:
            return "spinning"
        if len(items) < self.min_items:
            return "too_few_items"
        if total_weight(items) <= 0:
            return "no_weight"
        return None

    def spin(self) -> bool:
        """
        Start a spin if the wheel is idle and has enough weighted items.

        Returns:
            True if a spin started, False if the call was a no-op
        """
        reason = self._refusal_reason()
        if reason is not None:
            return self._refuse(reason)

        items = self.registry.items
        winner = select_item(items, self._rng)
        if winner is None:
            return self._refuse("no_selection")

        winning_index = next(i for i, item in enumerate(items) if item is winner)
        rotation = next_rotation(
            self._state.rotation,
            len(items),
            winning_index,
            self.extra_full_spins,
        )

        self._state = SpinState(rotation=rotation, is_spinning=True, current_result=None)
        self.registry.busy = True
        self.last_refusal = None
        _log_event(
            "spin.started",
            item_id=winner.id,
            label=winner.label,
            winning_index=winning_index,
            item_count=len(items),
            rotation=rotation,
        )

        self._scheduler.schedule(self.spin_duration_ms / 1000.0, lambda: self._settle(winner))
        return True

    def _settle(self, outcome: SpinOutcome) -> None:
        self._state = SpinState(
            rotation=self._state.rotation,
            is_spinning=False,
            current_result=outcome,
        )
        self.registry.busy = False
        self.history.record(outcome)
        _log_event("spin.settled", item_id=outcome.id, label=outcome.label, rotation=self._state.rotation)

        if self._on_settle is not None:
            self._on_settle(outcome)

    def reset(self) -> bool:
        """Return the wheel to 0 degrees and clear the result; no-op while spinning."""
        if self._state.is_spinning:
            _log_event("spin.reset_refused", reason="spinning")
            return False

        self._state = SpinState()
        _log_event("spin.reset")
        return True

    def clear_history(self) -> None:
        self.history.clear()

    def _refuse(self, reason: str) -> bool:
        self.last_refusal = reason
        _log_event("spin.refused", reason=reason, item_count=len(self.registry))
        return False

    def snapshot(self) -> Dict[str, Any]:
        """
        Everything the presentation layer needs to draw the wheel.

        Returns:
            Dictionary with state, items, segments, history and animation hints
        """
        items = self.registry.items
        return {
            "state": self._state.to_dict(),
            "items": [item.to_dict() for item in items],
            "segments": [segment.to_dict() for segment in segment_layout(len(items))],
            "history": [entry.to_dict() for entry in self.history.entries],
            "canSpin": self.can_spin,
            "canEdit": not self._state.is_spinning,
            "animation": {
                "durationMs": self.spin_duration_ms,
                "easing": SPIN_EASING,
                "active": self._state.is_spinning,
            },
        }
