"""Thread-safe accumulators shared by extraction workers."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Dict, Iterator, List, Mapping


class NamespaceCounter:
    """Counts namespace occurrences across concurrently processed documents."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def increment(self, name: str) -> None:
        with self._lock:
            self._counts[name] += 1

    def merge(self, counts: Mapping[str, int]) -> None:
        """Add a worker's local tally in one locked step."""
        with self._lock:
            for name, count in counts.items():
                if count > 0:
                    self._counts[name] += count

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


class WarningLog:
    """Append-only, ordered collection of warning messages."""

    def __init__(self) -> None:
        self._messages: List[str] = []
        self._lock = threading.Lock()

    def add(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    def messages(self) -> List[str]:
        with self._lock:
            return list(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages())

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __bool__(self) -> bool:
        return len(self) > 0


__all__ = ["NamespaceCounter", "WarningLog"]
