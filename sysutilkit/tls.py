"""Named thread-local storage slots."""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional


class ThreadLocalRegistry:
    """Maps names to per-thread values.

    Each name holds an independent value in every thread; a thread that has
    not set a value for a name reads None.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: Dict[str, threading.local] = {}

    def set(self, name: str, value: Any = None) -> None:
        """Store ``value`` under ``name`` for the calling thread."""
        with self._lock:
            slot = self._slots.get(name)
            if slot is None:
                slot = threading.local()
                self._slots[name] = slot
        slot.value = value

    def get(self, name: str) -> Optional[Any]:
        """Return the calling thread's value for ``name``, or None."""
        with self._lock:
            slot = self._slots.get(name)
        if slot is None:
            return None
        return getattr(slot, "value", None)