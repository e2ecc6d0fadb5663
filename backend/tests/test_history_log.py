from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

from backend.kv_store import InMemoryKeyValueStore
from pipeline.prize_wheel.history import HistoryLog
from pipeline.prize_wheel.types import HISTORY_KEY, Item


class FailingStore:
    def get(self, key):
        raise ConnectionError("store offline")

    def set(self, key, value):
        raise ConnectionError("store offline")

    def delete(self, key):
        raise ConnectionError("store offline")


def _outcome(index: int) -> Item:
    return Item(id=index, label=f"prize-{index}", color="#FF6B6B", weight=1)


def test_starts_empty_without_persisted_data():
    assert HistoryLog(InMemoryKeyValueStore()).entries == ()


def test_corrupt_or_non_list_data_yields_empty_history():
    store = InMemoryKeyValueStore()
    store.set(HISTORY_KEY, "]]")
    assert HistoryLog(store).entries == ()

    store.set(HISTORY_KEY, json.dumps({"label": "Yes"}))
    assert HistoryLog(store).entries == ()


def test_record_prepends_most_recent_first():
    history = HistoryLog(InMemoryKeyValueStore())

    history.record(_outcome(1))
    history.record(_outcome(2))

    assert [entry.id for entry in history.entries] == [2, 1]


def test_eleven_records_keep_ten_most_recent():
    store = InMemoryKeyValueStore()
    history = HistoryLog(store)

    for index in range(1, 12):
        history.record(_outcome(index))

    assert len(history) == 10
    assert [entry.id for entry in history.entries] == list(range(11, 1, -1))
    assert [entry["id"] for entry in json.loads(store.get(HISTORY_KEY))] == list(range(11, 1, -1))


def test_history_round_trips_through_store():
    store = InMemoryKeyValueStore()
    history = HistoryLog(store)
    for index in range(3):
        history.record(_outcome(index))

    assert HistoryLog(store).entries == history.entries


def test_oversized_persisted_history_is_truncated_on_load():
    store = InMemoryKeyValueStore()
    store.set(HISTORY_KEY, json.dumps([_outcome(i).to_dict() for i in range(15)]))

    assert len(HistoryLog(store)) == 10


def test_clear_removes_persisted_data():
    store = InMemoryKeyValueStore()
    history = HistoryLog(store)
    history.record(_outcome(1))

    history.clear()

    assert history.entries == ()
    assert store.get(HISTORY_KEY) is None


def test_store_failures_do_not_abort_in_memory_updates():
    history = HistoryLog(FailingStore())

    history.record(_outcome(1))
    assert [entry.id for entry in history.entries] == [1]

    history.clear()
    assert history.entries == ()


def test_deeply_nested_json_yields_empty_history():
    store = InMemoryKeyValueStore()
    store.set(HISTORY_KEY, "[" * 100_000 + "]" * 100_000)

    history = HistoryLog(store)

    assert history.entries == ()


def test_repeated_winner_is_kept_in_persisted_history():
    store = InMemoryKeyValueStore()
    history = HistoryLog(store)
    history.record(_outcome(3))
    history.record(_outcome(3))

    reloaded = HistoryLog(store)

    assert [entry.id for entry in reloaded.entries] == [3, 3]
