"""
Flag ledger - identifiers of edges already classified during a scan
"""

import threading
from typing import FrozenSet, Iterable


class FlagLedger:
    """
    Append-only set of classified edge identifiers shared by every search
    of one scan

    Membership checks and batch inserts are atomic with respect to each
    other so searches may run on several threads. A new scan starts with
    a new ledger.
    """

    def __init__(self):
        self._flagged = set()
        self._lock = threading.Lock()

    def is_flagged(self, identifier: int) -> bool:
        with self._lock:
            return identifier in self._flagged

    def mark_flagged(self, identifier: int) -> None:
        with self._lock:
            self._flagged.add(identifier)

    def mark_all(self, identifiers: Iterable[int]) -> int:
        """Insert a batch of identifiers under one lock; returns how many were new"""
        identifiers = list(identifiers)
        with self._lock:
            before = len(self._flagged)
            self._flagged.update(identifiers)
            return len(self._flagged) - before

    def snapshot(self) -> FrozenSet[int]:
        with self._lock:
            return frozenset(self._flagged)

    def __contains__(self, identifier: int) -> bool:
        return self.is_flagged(identifier)

    def __len__(self) -> int:
        with self._lock:
            return len(self._flagged)
