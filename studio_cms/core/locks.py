"""
In-process locks keyed by name.

Each content document gets its own re-entrant lock so read-modify-write
cycles on the same file are serialized, while different documents proceed
independently. Locks do not span processes.
"""

from __future__ import annotations

import threading
from typing import Dict


class LockRegistry:
    """Hands out one RLock per key, created on first use"""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def get(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock
