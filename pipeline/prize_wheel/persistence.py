"""Fail-soft JSON persistence helpers for wheel state."""

from __future__ import annotations
import json
import logging
from typing import Any, Callable, Optional, Protocol, TypeVar


LOGGER = logging.getLogger("prize_wheel.persistence")

T = TypeVar("T")


class KeyValueStore(Protocol):
    """String-keyed, string-valued durable store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


def load_json(
    store: KeyValueStore,
    key: str,
    decode: Callable[[Any], T],
    fallback: Callable[[], T],
) -> T:
    """
    Read and decode a stored JSON value, falling back on any failure.

    Args:
        store: Backing store
        key: Storage key
        decode: Converts the parsed JSON into the in-memory value;
            raises ValueError on unexpected shapes
        fallback: Produces the default value

    Returns:
        Decoded value, or the fallback if absent, malformed or unreadable
    """
    try:
        raw = store.get(key)
    except Exception as exc:
        LOGGER.warning("store.read_failed", extra={"store_key": key, "error": str(exc)})
        return fallback()

    if raw is None:
        return fallback()

    try:
        return decode(json.loads(raw))
    except (TypeError, ValueError, RecursionError) as exc:
        # json.JSONDecodeError is a ValueError; deeply nested input raises RecursionError
        LOGGER.warning("store.corrupt_value", extra={"store_key": key, "error": str(exc)})
        return fallback()


def save_json(store: KeyValueStore, key: str, payload: Any) -> bool:
    """Write a JSON value; returns False instead of raising on failure."""
    try:
        store.set(key, json.dumps(payload))
    except Exception as exc:
        LOGGER.warning("store.write_failed", extra={"store_key": key, "error": str(exc)})
        return False
    return True


def delete_key(store: KeyValueStore, key: str) -> bool:
    """Remove a stored value; returns False instead of raising on failure."""
    try:
        store.delete(key)
    except Exception as exc:
        LOGGER.warning("store.delete_failed", extra={"store_key": key, "error": str(exc)})
        return False
    return True
