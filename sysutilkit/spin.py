"""Spin lock with a pluggable backoff strategy."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

BackoffFunc = Callable[[int], None]


def default_backoff(count: int) -> None:
    """Back off according to how many times a spin has already failed.

    Fewer than 16 attempts spin without giving up the processor, up to 32
    yield the thread, up to 64 sleep for 5 ms and beyond that for 10 ms.
    """
    if count < 16:
        return
    if count < 32:
        time.sleep(0)
    elif count < 64:
        time.sleep(0.005)
    else:
        time.sleep(0.010)


class SpinLock:
    """A lock acquired by spinning, calling ``backoff`` between attempts.

    Unlocking a lock that is not held is allowed and has no effect.
    """

    def __init__(self, backoff: Optional[BackoffFunc] = None) -> None:
        self._backoff: BackoffFunc = backoff if backoff is not None else default_backoff
        self._guard = threading.Lock()
        self._locked = False

    def try_lock(self) -> bool:
        """Take the lock if it is free; return whether it was taken."""
        with self._guard:
            was_locked = self._locked
            self._locked = True
        return not was_locked

    def lock(self) -> None:
        """Spin until the lock is taken."""
        count = 0
        while not self.try_lock():
            self._backoff(count)
            count += 1

    def unlock(self) -> None:
        """Release the lock."""
        with self._guard:
            self._locked = False

    @property
    def locked(self) -> bool:
        """Whether the lock is currently held."""
        with self._guard:
            return self._locked

    def __enter__(self) -> "SpinLock":
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()