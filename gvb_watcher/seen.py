"""Thread-safe record of devices already processed."""

from __future__ import annotations

import threading


class SeenSet:
    """Canonical device targets claimed for processing during this process."""

    def __init__(self) -> None:
        self._items: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, target: str) -> bool:
        """Mark ``target`` as processed; return False if it already was."""
        with self._lock:
            if target in self._items:
                return False
            self._items.add(target)
            return True

    def __contains__(self, target: object) -> bool:
        with self._lock:
            return target in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
