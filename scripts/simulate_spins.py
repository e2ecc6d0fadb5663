#!/usr/bin/env python3
"""Spin the wheel offline and compare outcome frequencies with item weights."""
from __future__ import annotations

import argparse
import os
import sys
from collections import Counter
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.kv_store import FileKeyValueStore, InMemoryKeyValueStore
from pipeline.prize_wheel import (
    HistoryLog,
    ItemRegistry,
    ManualScheduler,
    RandomSource,
    SpinSession,
    segment_at_pointer,
)
from pipeline.prize_wheel.types import ITEMS_KEY


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate prize wheel spins.")
    parser.add_argument("--spins", type=int, default=10_000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--store-dir",
        default=None,
        help="Read the item list from a local wheel store (defaults to the built-in items).",
    )
    parser.add_argument("--label", action="append", default=[], help="Extra item label to add.")
    return parser


def _seed_store(store_dir: str | None) -> InMemoryKeyValueStore:
    store = InMemoryKeyValueStore()
    if store_dir:
        raw_items = FileKeyValueStore(Path(store_dir).resolve()).get(ITEMS_KEY)
        if raw_items is not None:
            store.set(ITEMS_KEY, raw_items)
    return store


def main() -> int:
    args = _build_parser().parse_args()

    store = _seed_store(args.store_dir or os.getenv("WHEEL_STORE_DIR"))
    scheduler = ManualScheduler()
    registry = ItemRegistry(store)
    for label in args.label:
        registry.add(label)

    counts: Counter[int] = Counter()
    misaligned = 0
    session = SpinSession(
        registry,
        HistoryLog(store),
        scheduler,
        rng=RandomSource(args.seed),
        on_settle=lambda outcome: counts.update([outcome.id]),
    )

    items = registry.items
    index_by_id = {item.id: i for i, item in enumerate(items)}
    for _ in range(args.spins):
        if not session.spin():
            print(f"Spin refused: {session.last_refusal}")
            return 1
        scheduler.run_all()
        winner = session.state.current_result
        if segment_at_pointer(session.state.rotation, len(items)) != index_by_id[winner.id]:
            misaligned += 1

    total = sum(item.weight for item in items)
    print(f"{'label':<20} {'weight':>8} {'expected':>9} {'observed':>9}")
    for item in items:
        expected = item.weight / total
        observed = counts[item.id] / args.spins
        print(f"{item.label:<20} {item.weight:>8} {expected:>9.4f} {observed:>9.4f}")
    print(f"spins={args.spins} misaligned={misaligned} final_rotation={session.state.rotation:.2f}")
    return 0 if misaligned == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
