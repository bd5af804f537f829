"""Latest-scan cache for a single sensor source."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class ScanCache(Generic[T]):
    """Holds the most recent observations of one source plus a freshness flag.

    ``fresh`` is ``True`` while the current contents have not been handed to
    a consumer.  It starts ``False``: an empty cache has nothing to deliver.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: set[T] = set()
        self._fresh = False

    def replace(self, observations: Iterable[T]) -> None:
        """Discard previous contents and store *observations* as fresh."""
        items = set(observations)
        with self._lock:
            self._items = items
            self._fresh = True

    def snapshot(self) -> set[T]:
        """Return a copy of the contents and mark them consumed."""
        with self._lock:
            self._fresh = False
            return set(self._items)

    def peek(self) -> set[T]:
        """Return a copy of the contents without marking them consumed."""
        with self._lock:
            return set(self._items)

    def is_fresh(self) -> bool:
        with self._lock:
            return self._fresh

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
