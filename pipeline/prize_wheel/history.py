"""Bounded, persisted log of spin outcomes (most recent first)."""

from __future__ import annotations
import logging
from typing import Tuple
from pipeline.prize_wheel.persistence import KeyValueStore, delete_key, load_json, save_json
from pipeline.prize_wheel.types import (
    HISTORY_KEY,
    MAX_HISTORY,
    SpinOutcome,
    items_from_json_payload,
    items_to_json_payload,
)


LOGGER = logging.getLogger("prize_wheel.history")


class HistoryLog:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = HISTORY_KEY,
        limit: int = MAX_HISTORY,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = limit
        self._entries: Tuple[SpinOutcome, ...] = ()
        self.load()

    @property
    def entries(self) -> Tuple[SpinOutcome, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> Tuple[SpinOutcome, ...]:
        """Reload from the store; absent or corrupt data yields an empty log."""
        loaded = load_json(self._store, self._key, items_from_json_payload, list)
        self._entries = tuple(loaded[: self._limit])
        return self._entries

    def record(self, outcome: SpinOutcome) -> None:
        """Prepend an outcome, keep the newest entries and persist them."""
        self._entries = (outcome, *self._entries)[: self._limit]
        save_json(self._store, self._key, items_to_json_payload(list(self._entries)))
        LOGGER.info(
            "history.recorded",
            extra={"label": outcome.label, "history_size": len(self._entries)},
        )

    def clear(self) -> None:
        self._entries = ()
        delete_key(self._store, self._key)
        LOGGER.info("history.cleared")
