"""Tests for usingstats.aggregator."""

from __future__ import annotations

import threading
from collections import Counter

from usingstats.aggregator import NamespaceCounter, WarningLog


def test_increment_inserts_then_adds() -> None:
    counter = NamespaceCounter()
    counter.increment("System")
    counter.increment("System")
    counter.increment("Xunit")

    assert counter.snapshot() == {"System": 2, "Xunit": 1}
    assert len(counter) == 2


def test_snapshot_is_a_copy() -> None:
    counter = NamespaceCounter()
    counter.increment("System")
    snapshot = counter.snapshot()
    counter.increment("System")

    assert snapshot == {"System": 1}


def test_merge_ignores_non_positive_counts() -> None:
    counter = NamespaceCounter()
    counter.merge(Counter({"Moq": 2, "Unused": 0}))

    assert counter.snapshot() == {"Moq": 2}


def test_concurrent_updates_are_not_lost() -> None:
    counter = NamespaceCounter()
    barrier = threading.Barrier(8)

    def _worker(index: int) -> None:
        barrier.wait()
        for _ in range(500):
            counter.increment("System")
            counter.merge({"System.Linq": 1, f"Worker{index}": 1})

    threads = [threading.Thread(target=_worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = counter.snapshot()
    assert snapshot["System"] == 4000
    assert snapshot["System.Linq"] == 4000
    assert all(snapshot[f"Worker{i}"] == 500 for i in range(8))


def test_warning_log_preserves_order() -> None:
    log = WarningLog()
    assert not log

    log.add("first")
    log.add("second")

    assert log
    assert len(log) == 2
    assert list(log) == ["first", "second"]
    assert log.messages() == ["first", "second"]
