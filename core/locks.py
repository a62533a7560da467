# core/locks.py

"""
Per-key in-process locks.

Serializes read-modify-write sequences on the same complaint inside one
worker process. Rows are additionally guarded by conditional updates in
the repository, so separate processes still cannot silently overwrite
each other.
"""

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator


class _Entry:
    def __init__(self):
        self.lock = Lock()
        self.holders = 0


class KeyedLock:
    """
    Hands out one lock per key and forgets it once nobody holds it.

    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._entries: Dict[str, _Entry] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    self._entries.pop(key, None)

    def active_keys(self) -> int:
        with self._guard:
            return len(self._entries)


# Global lock registry for complaint rows
complaint_locks = KeyedLock()
