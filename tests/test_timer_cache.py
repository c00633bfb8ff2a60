import datetime
import errno
import threading
import time

import pytest

from sysutilkit.timer_cache import (
    DeadlineTimerCache,
    SteadyTimerCache,
    Timer,
    TimerCache,
    TimerError,
)


class _InlinePool:
    """Runs posted work at once and counts how many items have run."""

    def __init__(self):
        self._cond = threading.Condition()
        self.count = 0

    def post(self, func):
        func()
        with self._cond:
            self.count += 1
            self._cond.notify_all()

    def wait_for(self, n, timeout=3.0):
        with self._cond:
            return self._cond.wait_for(lambda: self.count >= n, timeout)


def test_no_timers_available_reports_eagain():
    caches = [
        TimerCache(_InlinePool()),
        SteadyTimerCache(_InlinePool()),
        DeadlineTimerCache(_InlinePool()),
    ]
    for cache in caches:
        errors = []
        cache.queue_work_item_after(0.01, errors.append)
        assert len(errors) == 1
        assert isinstance(errors[0], TimerError)
        assert errors[0].code == errno.EAGAIN


def _check_handler_runs_and_timer_returns(pool, cache):
    cache.add(0, 1)
    borrowed = cache.get(0)
    timer = borrowed.obj
    borrowed.release()

    results = []
    start = time.monotonic()
    cache.queue_work_item_after(0.05, lambda err: results.append((err, time.monotonic())))
    assert pool.wait_for(1)
    error, finished = results[0]
    assert error is None
    assert finished - start >= 0.04
    again = cache.get(0)
    assert again.obj is timer


def test_handler_runs_after_duration_and_timer_returns():
    pool = _InlinePool()
    cache = TimerCache(pool)
    cache.add(0, 1)
    borrowed = cache.get(0)
    timer = borrowed.obj
    borrowed.release()

    results = []
    start = time.monotonic()
    cache.queue_work_item_after(0.05, lambda err: results.append((err, time.monotonic())))
    assert pool.wait_for(1)
    error, finished = results[0]
    assert error is None
    assert finished - start >= 0.04
    assert cache.get(0).obj is timer


def test_steady_cache_handler_runs_and_timer_returns():
    pool = _InlinePool()
    _check_handler_runs_and_timer_returns(pool, SteadyTimerCache(pool))


def test_deadline_cache_handler_runs_and_timer_returns():
    pool = _InlinePool()
    _check_handler_runs_and_timer_returns(pool, DeadlineTimerCache(pool))


def test_invalid_duration_reports_error_and_returns_timer():
    pool = _InlinePool()
    cache = SteadyTimerCache(pool)
    cache.add(0, 1)
    errors = []
    cache.queue_work_item_after(float("nan"), errors.append)
    assert [e.code for e in errors] == [errno.EINVAL]
    pooled = cache.get(0)
    assert pooled is not None and isinstance(pooled.obj, Timer)


def test_timedelta_duration():
    pool = _InlinePool()
    cache = SteadyTimerCache(pool)
    cache.add(0, 1)
    results = []
    cache.queue_work_item_after(datetime.timedelta(milliseconds=20), results.append)
    assert pool.wait_for(1)
    assert results == [None]


def test_pool_grows_when_timers_run_out():
    pool = _InlinePool()
    cache = SteadyTimerCache(pool)
    cache.add(0, 1)
    results = []
    lock = threading.Lock()

    def handler(err):
        with lock:
            results.append(err)

    cache.queue_work_item_after(0.02, handler)
    cache.queue_work_item_after(0.02, handler)
    assert pool.wait_for(2)
    assert results == [None, None]


def test_cancel_aborts_pending_wait():
    pool = _InlinePool()
    timer = Timer(pool)
    timer.expires_from_now(10)
    errors = []
    timer.async_wait(errors.append)
    assert timer.cancel() == 1
    assert len(errors) == 1
    assert errors[0].code == errno.ECANCELED
    assert timer.cancel() == 0


def test_expires_from_now_cancels_pending_wait():
    pool = _InlinePool()
    timer = Timer(pool)
    timer.expires_from_now(10)
    errors = []
    timer.async_wait(errors.append)
    assert timer.expires_from_now(10) == 1
    assert errors[0].code == errno.ECANCELED


def test_wait_without_expiry_fires_immediately():
    pool = _InlinePool()
    timer = Timer(pool)
    results = []
    timer.async_wait(results.append)
    assert pool.wait_for(1)
    assert results == [None]
    assert timer.cancel() == 0


@pytest.mark.parametrize("bad", [float("inf"), float("nan"), "soon"])
def test_invalid_duration_raises(bad):
    timer = Timer(_InlinePool())
    with pytest.raises(TimerError) as info:
        timer.expires_from_now(bad)
    assert info.value.code == errno.EINVAL
    assert timer.expiry is None


def test_expiry_uses_given_clock():
    timer = Timer(_InlinePool(), clock=lambda: 100.0)
    timer.expires_from_now(5)
    assert timer.expiry == 105.0