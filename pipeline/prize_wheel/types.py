"""Type definitions for the prize wheel engine."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


# Segment colours, cycled by list length when an item is added
PALETTE: Tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFD93D",
    "#6C5CE7",
    "#A8E6CF",
    "#FF8B94",
    "#FFAAA5",
    "#D4A5A5",
    "#9B59B6",
    "#3498DB",
    "#E67E22",
    "#2ECC71",
    "#F1C40F",
    "#E74C3C",
)

# Engine timing and geometry defaults
SPIN_DURATION_MS = 4000
EXTRA_FULL_SPINS = 5
MIN_ITEMS_TO_SPIN = 2
MAX_HISTORY = 10
SPIN_EASING = "cubic-bezier(0.25, 0.1, 0.25, 1)"

# Persistence keys
ITEMS_KEY = "items"
HISTORY_KEY = "history"


@dataclass(frozen=True)
class Item:
    """A weighted, labelled, coloured wheel entry."""
    id: int
    label: str
    color: str
    weight: float = 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "label": self.label,
            "color": self.color,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "Item":
        """
        Build an Item from a decoded JSON object.

        Raises:
            ValueError: If the payload does not describe an item
        """
        if not isinstance(payload, dict):
            raise ValueError("Item payload must be an object.")

        item_id = payload.get("id")
        label = payload.get("label")
        color = payload.get("color")
        weight = payload.get("weight", 1)

        # bool is an int subclass; reject it explicitly
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            raise ValueError("Item id must be an integer.")
        if not isinstance(label, str) or not isinstance(color, str):
            raise ValueError("Item label and color must be strings.")
        if not isinstance(weight, (int, float)) or isinstance(weight, bool):
            raise ValueError("Item weight must be a number.")

        return cls(id=item_id, label=label, color=color, weight=weight)


# A SpinOutcome is the Item value captured when it was won
SpinOutcome = Item


DEFAULT_ITEMS: Tuple[Item, ...] = (
    Item(id=1, label="Yes", color=PALETTE[0], weight=1),
    Item(id=2, label="No", color=PALETTE[1], weight=1),
    Item(id=3, label="Maybe", color=PALETTE[2], weight=1),
    Item(id=4, label="Spin Again", color=PALETTE[3], weight=1),
)


@dataclass(frozen=True)
class SpinState:
    """Read-only snapshot of a spin session."""
    rotation: float = 0.0  # Cumulative rotation in degrees
    is_spinning: bool = False
    current_result: Optional[SpinOutcome] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "rotation": self.rotation,
            "isSpinning": self.is_spinning,
            "currentResult": self.current_result.to_dict() if self.current_result else None,
        }


@dataclass(frozen=True)
class Segment:
    """Angular span of one item in the unrotated wheel layout."""
    index: int
    start: float
    center: float
    end: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "index": self.index,
            "start": self.start,
            "center": self.center,
            "end": self.end,
        }


def items_to_json_payload(items: List[Item]) -> List[Dict[str, Any]]:
    """Serialize a list of items for storage."""
    return [item.to_dict() for item in items]


def items_from_json_payload(payload: Any) -> List[Item]:
    """
    Decode a stored list of items.

    Raises:
        ValueError: If the payload is not a list of item objects
    """
    if not isinstance(payload, list):
        raise ValueError("Stored items must be a list.")
    return [Item.from_dict(entry) for entry in payload]
