"""Pooled timers that run work on the thread pool once a delay has passed."""

from __future__ import annotations

import datetime
import errno
import math
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, List, Optional, Union

from sysutilkit.object_pool import ObjectPool
from sysutilkit.thread_pool import ThreadPool

DEFAULT_TIMER_CACHE_KEY = 0
"""Key under which every pooled timer is stored."""

Duration = Union[int, float, datetime.timedelta]


class TimerError(Exception):
    """A timer operation failed or was aborted; ``code`` is an errno value."""

    def __init__(self, code: int, message: Optional[str] = None) -> None:
        self.code = code
        super().__init__(message if message is not None else os.strerror(code))


TimerHandler = Callable[[Optional[TimerError]], Any]


def _to_seconds(duration: Duration) -> float:
    if isinstance(duration, datetime.timedelta):
        seconds = duration.total_seconds()
    else:
        try:
            seconds = float(duration)
        except (TypeError, ValueError):
            raise TimerError(errno.EINVAL, f"invalid timer duration {duration!r}") from None
    if not math.isfinite(seconds):
        raise TimerError(errno.EINVAL, f"invalid timer duration {duration!r}")
    return seconds


@dataclass(eq=False)
class _PendingWait:
    handler: TimerHandler
    thread: Optional[threading.Timer] = field(default=None)


class Timer:
    """A one-shot timer whose handlers are run on a thread pool.

    Handlers receive None when the timer expires and a :class:`TimerError`
    with ``errno.ECANCELED`` when the wait is cancelled.
    """

    def __init__(
        self,
        pool: Optional[ThreadPool] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._pool = pool
        self._clock = clock
        self._lock = threading.Lock()
        self._expiry: Optional[float] = None
        self._waits: List[_PendingWait] = []

    @property
    def expiry(self) -> Optional[float]:
        """Expiry time on this timer's clock, or None if never set."""
        with self._lock:
            return self._expiry

    def expires_from_now(self, duration: Duration) -> int:
        """Set the expiry ``duration`` (seconds or timedelta) from now.

        Pending waits are cancelled; the number cancelled is returned.
        Raises :class:`TimerError` for a duration that is not a finite number.
        """
        seconds = _to_seconds(duration)
        cancelled = self.cancel()
        with self._lock:
            self._expiry = self._clock() + seconds
        return cancelled

    def async_wait(self, handler: TimerHandler) -> None:
        """Run ``handler`` on the thread pool when the timer expires."""
        with self._lock:
            if self._expiry is None:
                delay = 0.0
            else:
                delay = max(0.0, self._expiry - self._clock())
            wait = _PendingWait(handler)
            thread = threading.Timer(delay, self._expire, args=(wait,))
            thread.daemon = True
            wait.thread = thread
            self._waits.append(wait)
            thread.start()

    def cancel(self) -> int:
        """Abort every pending wait and return how many there were."""
        with self._lock:
            waits, self._waits = self._waits, []
        for wait in waits:
            if wait.thread is not None:
                wait.thread.cancel()
            self._dispatch(wait.handler, TimerError(errno.ECANCELED, "operation aborted"))
        return len(waits)

    def _expire(self, wait: _PendingWait) -> None:
        with self._lock:
            try:
                self._waits.remove(wait)
            except ValueError:
                return
        self._dispatch(wait.handler, None)

    def _dispatch(self, handler: TimerHandler, error: Optional[TimerError]) -> None:
        pool = self._pool if self._pool is not None else ThreadPool.instance()
        pool.post(lambda: handler(error))


def _timer_key(_timer: Timer) -> int:
    return DEFAULT_TIMER_CACHE_KEY


class TimerCache(ObjectPool):
    """Pool of timers used to queue thread pool work after a delay.

    Timers are only available after :meth:`add` has put some in the pool;
    when the pool runs dry it grows by the number already allocated.
    """

    logger_name: ClassVar[str] = "TimerCache"
    clock: ClassVar[Callable[[], float]] = staticmethod(time.monotonic)

    def __init__(self, thread_pool: Optional[ThreadPool] = None) -> None:
        self._thread_pool_override = thread_pool
        super().__init__(
            create=self._new_timer,
            free=Timer.cancel,
            clear=Timer.cancel,
            key_of=_timer_key,
        )

    def _executor(self) -> ThreadPool:
        if self._thread_pool_override is not None:
            return self._thread_pool_override
        return ThreadPool.instance()

    def _new_timer(self, _key: int) -> Timer:
        return Timer(self._executor(), type(self).clock)

    def queue_work_item_after(self, duration: Duration, func: TimerHandler) -> None:
        """Run ``func`` on the thread pool once ``duration`` has passed.

        ``func`` receives None on expiry, or a :class:`TimerError` when no
        timer could be had (``errno.EAGAIN``), the duration was invalid or
        the wait was cancelled.
        """
        pooled = self.get(DEFAULT_TIMER_CACHE_KEY)
        if pooled is None:
            self._log.error("Failed to get a timer.")
            unavailable = TimerError(errno.EAGAIN)
            self._executor().post(lambda: func(unavailable))
            return
        timer = pooled.obj
        try:
            timer.expires_from_now(duration)
        except TimerError as err:
            self._log.error("Failed to set the timer expiry (%s).", err)
            failure = err
            pooled.release()
            self._executor().post(lambda: func(failure))
            return

        def on_timeout(error: Optional[TimerError]) -> None:
            try:
                func(error)
            finally:
                pooled.release()

        timer.async_wait(on_timeout)


class SteadyTimerCache(TimerCache):
    """Timer cache measuring time on the monotonic clock."""

    logger_name: ClassVar[str] = "SteadyTimerCache"
    clock: ClassVar[Callable[[], float]] = staticmethod(time.monotonic)


class DeadlineTimerCache(TimerCache):
    """Timer cache measuring time on the wall clock."""

    logger_name: ClassVar[str] = "DeadlineTimerCache"
    clock: ClassVar[Callable[[], float]] = staticmethod(time.time)