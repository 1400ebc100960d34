"""Per-key mutual exclusion within one process."""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager


class KeyedLocks:
    """Hands out one lock per key; entries are dropped when nobody holds or waits."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        """Hold every key for the duration of the block. Keys are taken in sorted order."""
        ordered = sorted(set(keys))
        locks = [self._checkout(key) for key in ordered]
        acquired: list[threading.Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._checkin(key)

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            self._users[key] = self._users.get(key, 0) + 1
            return self._locks.setdefault(key, threading.Lock())

    def _checkin(self, key: str) -> None:
        with self._guard:
            remaining = self._users.get(key, 0) - 1
            if remaining > 0:
                self._users[key] = remaining
            else:
                self._users.pop(key, None)
                self._locks.pop(key, None)
