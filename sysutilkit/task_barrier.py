"""Barrier that waits until a number of tasks report completion."""

from __future__ import annotations

import threading
from typing import Optional

from sysutilkit.spin import BackoffFunc, default_backoff


class TaskBarrier:
    """Counts finished tasks and lets a caller wait until all are done."""

    def __init__(self, task_count: int, backoff: Optional[BackoffFunc] = None) -> None:
        self._backoff: BackoffFunc = backoff if backoff is not None else default_backoff
        self._mutex = threading.Lock()
        self._task_count = task_count
        self._finished_count = 0

    def reset_task_count(self, count: int) -> None:
        """Set a new total task count."""
        with self._mutex:
            self._task_count = count

    def reset(self) -> None:
        """Set the finished task count back to zero."""
        with self._mutex:
            self._finished_count = 0

    def inc_finished_count(self, count: int = 1) -> None:
        """Add ``count`` to the finished task count."""
        with self._mutex:
            self._finished_count += count

    def current_finished_count(self) -> int:
        """Return the current finished task count."""
        with self._mutex:
            return self._finished_count

    def _pending(self) -> bool:
        with self._mutex:
            return self._finished_count < self._task_count

    def wait_all_finished(self) -> None:
        """Spin until the finished count reaches the task count."""
        count = 0
        while self._pending():
            self._backoff(count)
            count += 1