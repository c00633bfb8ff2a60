"""Self-sizing worker thread pool."""

from __future__ import annotations

import logging
import os
import queue
import threading
from typing import Callable, ClassVar, Optional

from sysutilkit.diagnostics import get_processor_usage
from sysutilkit.spin import default_backoff

_log = logging.getLogger("ThreadPool")

_IDLE_WAIT_SECONDS = 0.010
_SHRINK_USAGE = 90
_GROW_USAGE = 75

_init_concurrent_hint = os.cpu_count() or 1


def set_init_concurrent_hint(hint: int) -> None:
    """Set the concurrency hint used to size pools created without explicit limits."""
    global _init_concurrent_hint
    _init_concurrent_hint = hint


class ThreadPool:
    """A pool of worker threads that grows under load and shrinks when idle.

    The pool starts ``min_threads`` workers. When every worker is busy, the
    pool is below ``max_threads`` and processor usage is under 75%, a new
    worker is started. A worker above the minimum exits when it finds no
    work or processor usage is above 90%.
    """

    _instance: ClassVar[Optional["ThreadPool"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        min_threads: Optional[int] = None,
        max_threads: Optional[int] = None,
        usage_probe: Optional[Callable[[], int]] = None,
    ) -> None:
        hint = _init_concurrent_hint
        self._min = hint if min_threads is None else min_threads
        self._max = hint * 2 + 2 if max_threads is None else max_threads
        self._usage_probe = usage_probe if usage_probe is not None else get_processor_usage
        self._queue: "queue.SimpleQueue[Callable[[], object]]" = queue.SimpleQueue()
        self._stopped = threading.Event()
        self._count_lock = threading.Lock()
        self._thread_count = 0
        self._busy_count = 0
        self._local = threading.local()
        for _ in range(self._min):
            self._create_thread()

    @classmethod
    def instance(cls) -> "ThreadPool":
        """Return the shared pool, creating it on first use."""
        with cls._instance_lock:
            if ThreadPool._instance is None:
                ThreadPool._instance = cls()
            return ThreadPool._instance

    @classmethod
    def destroy(cls) -> None:
        """Stop and drop the shared pool."""
        with cls._instance_lock:
            pool, ThreadPool._instance = ThreadPool._instance, None
        if pool is not None:
            pool.stop()

    def post(self, func: Callable[[], object]) -> None:
        """Queue ``func`` to be run by a worker thread."""
        self._queue.put(func)

    def stop(self) -> None:
        """Stop all workers and return once every one has exited.

        Work still queued is not run.
        """
        self._stopped.set()
        count = 0
        while self.thread_count():
            default_backoff(count)
            count += 1

    def thread_count(self) -> int:
        """Number of live worker threads."""
        with self._count_lock:
            return self._thread_count

    def busy_count(self) -> int:
        """Number of workers currently running a task."""
        with self._count_lock:
            return self._busy_count

    def _usage(self) -> int:
        try:
            return self._usage_probe()
        except Exception:
            _log.exception("Failed to read processor usage.")
            return 0

    def _create_thread(self) -> bool:
        with self._count_lock:
            self._thread_count += 1
        try:
            threading.Thread(target=self._worker, name="ThreadPoolWorker", daemon=True).start()
        except RuntimeError as ex:
            with self._count_lock:
                self._thread_count -= 1
            _log.error("Thread pool failed to create a thread: %s", ex)
            return False
        return True

    def _invoke(self, func: Callable[[], object]) -> None:
        if getattr(self._local, "processing", False):
            func()
            return
        self._local.processing = True
        with self._count_lock:
            self._busy_count += 1
            busy = self._busy_count
            threads = self._thread_count
        try:
            if busy >= threads and threads < self._max and self._usage() < _GROW_USAGE:
                self._create_thread()
            func()
        finally:
            with self._count_lock:
                self._busy_count -= 1
            self._local.processing = False

    def _try_retire(self) -> bool:
        with self._count_lock:
            if self._thread_count > self._min:
                self._thread_count -= 1
                return True
        return False

    def _worker(self) -> None:
        retired = False
        try:
            while not self._stopped.is_set():
                try:
                    try:
                        func: Optional[Callable[[], object]] = self._queue.get(
                            timeout=_IDLE_WAIT_SECONDS
                        )
                    except queue.Empty:
                        func = None
                    if func is not None and not self._stopped.is_set():
                        self._invoke(func)
                    if self._stopped.is_set():
                        break
                    if func is None or self._usage() > _SHRINK_USAGE:
                        if self._try_retire():
                            retired = True
                            break
                except Exception:
                    _log.exception("Thread pool worker caught an exception.")
        finally:
            if not retired:
                with self._count_lock:
                    self._thread_count -= 1


def queue_work_item(func: Callable[[], object]) -> None:
    """Queue ``func`` on the shared thread pool."""
    ThreadPool.instance().post(func)