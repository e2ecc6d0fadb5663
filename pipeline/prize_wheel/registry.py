"""Mutable, persisted list of wheel items."""

from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional, Tuple
from pipeline.prize_wheel.persistence import KeyValueStore, load_json, save_json
from pipeline.prize_wheel.types import (
    DEFAULT_ITEMS,
    ITEMS_KEY,
    PALETTE,
    Item,
    items_from_json_payload,
    items_to_json_payload,
)


LOGGER = logging.getLogger("prize_wheel.registry")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _decode_items(payload) -> List[Item]:
    items = items_from_json_payload(payload)
    if len({item.id for item in items}) != len(items):
        raise ValueError("Stored items must have unique ids.")
    return items


class ItemRegistry:
    """
    Owns the wheel's item list.

    The list is replaced wholesale on every change and persisted
    immediately. ``remove`` and ``clear`` are refused while ``busy`` is
    set (the spin session sets it for the duration of a spin).
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = ITEMS_KEY,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._store = store
        self._key = key
        self._clock_ms = clock_ms
        self._items: Tuple[Item, ...] = ()
        self.busy = False
        self.load()

    @property
    def items(self) -> Tuple[Item, ...]:
        """Current items; an immutable snapshot."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> Tuple[Item, ...]:
        """Reload from the store, falling back to the default item set."""
        self._items = tuple(
            load_json(self._store, self._key, _decode_items, lambda: list(DEFAULT_ITEMS))
        )
        return self._items

    def get(self, item_id: int) -> Optional[Item]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(self, label: str) -> Optional[Item]:
        """
        Append a new item with weight 1 and the next palette colour.

        Args:
            label: Display text; surrounding whitespace is trimmed

        Returns:
            The created item, or None if the label was blank
        """
        cleaned = (label or "").strip()
        if not cleaned:
            return None

        item = Item(
            id=self._next_id(),
            label=cleaned,
            color=PALETTE[len(self._items) % len(PALETTE)],
            weight=1,
        )
        self._replace([*self._items, item])
        LOGGER.info("items.added", extra={"item_id": item.id, "label": item.label})
        return item

    def remove(self, item_id: int) -> bool:
        """Drop the item with the given id; no-op while busy."""
        if self.busy:
            LOGGER.info("items.remove_refused", extra={"item_id": item_id, "reason": "spinning"})
            return False

        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return False

        self._replace(remaining)
        LOGGER.info("items.removed", extra={"item_id": item_id})
        return True

    def clear(self) -> bool:
        """Empty the list; no-op while busy."""
        if self.busy:
            LOGGER.info("items.clear_refused", extra={"reason": "spinning"})
            return False

        self._replace([])
        LOGGER.info("items.cleared")
        return True

    def _replace(self, items: List[Item]) -> None:
        self._items = tuple(items)
        save_json(self._store, self._key, items_to_json_payload(items))

    def _next_id(self) -> int:
        # Time-based, but strictly above every id already in use
        highest = max((item.id for item in self._items), default=0)
        return max(self._clock_ms(), highest + 1)
