# sysutilkit

Building blocks for threaded Python programs. The package has no
dependencies outside the standard library.

## Modules

- `sysutilkit.spin`: `SpinLock` (`try_lock`, `lock`, `unlock`, usable with
  `with`) and `default_backoff(count)`, which returns at once for the first
  16 attempts, then yields the thread up to 32, sleeps 5 ms up to 64 and
  10 ms after that. Any callable taking the attempt count can be passed as
  the back-off.
- `sysutilkit.task_barrier`: `TaskBarrier(task_count)`; workers call
  `inc_finished_count()`, and `wait_all_finished()` spins until the finished
  count reaches the task count. `reset()` and `reset_task_count()` reuse it.
- `sysutilkit.wait_event`: `WaitEvent`, an auto-reset event. A signal sent
  while nobody waits is kept for the next `wait` or `timed_wait`. Each
  operation takes an optional hook run under the event's lock; a
  `signal` hook that returns a false value (other than None) cancels the
  signal.
- `sysutilkit.tls`: `ThreadLocalRegistry`, whose `set(name, value)` and
  `get(name)` store a separate value per thread; unset names read None.
- `sysutilkit.resguard`: `ResGuard(obj, deleter)`, which calls the deleter
  on `close()` or on leaving a `with` block; `swap` exchanges two guards.
- `sysutilkit.object_pool`: `ObjectPool`, a keyed pool. `add(key, count)`
  creates objects; `get(key)` returns a `PooledObject` or None, matching
  blocks with `<=` by default and growing a dry block by its allocated count.
  Releasing a `PooledObject` clears the object and returns it to its block.
  `ObjectPool.instance()` / `destroy()` manage one shared pool per subclass.
- `sysutilkit.diagnostics`: `CpuTimes`, `parse_cpu_times`, `usage_between`,
  `ProcessorUsageMonitor` and `get_processor_usage()`, which report the
  busy percentage since the previous call, read from `/proc/stat`.
- `sysutilkit.path_helper`: `app_executable_path()`, `app_deploy_path()`
  (the executable's directory, ending in a separator), `is_absolute_path`
  and `combine(base, *parts)`, which adds a separator only where missing.
- `sysutilkit.thread_pool`: `ThreadPool`, which starts `min_threads`
  workers, adds one when all are busy, below `max_threads` and CPU usage is
  under 75 %, and retires surplus workers when idle or above 90 %.
  `queue_work_item(func)` posts to the shared pool; `set_init_concurrent_hint`
  sets the default sizing.
- `sysutilkit.timer_cache`: `Timer`, `TimerError`, and the pools
  `TimerCache`, `SteadyTimerCache` (monotonic clock) and
  `DeadlineTimerCache` (wall clock). `queue_work_item_after(duration, func)`
  runs `func(None)` on the thread pool once the delay has passed, or
  `func(TimerError)` when no timer is available, the duration is invalid or
  the wait is cancelled.
- `sysutilkit.type_list`: `TypedValue`, `at`, `search`, `any_of`,
  `contains_type` and `TypeList` (`has`, `is_empty`, `contains_value`,
  `subtract_from`).
- `sysutilkit.sql_database`: `SqlDatabaseType`, the abstract `SqlDatabase`
  interface and `SqlDatabasePool`, which pools connections by exact type
  using the factories you give it.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from sysutilkit.spin import SpinLock

lock = SpinLock()
with lock:
    ...  # critical section
```

```python
from sysutilkit.wait_event import WaitEvent

event = WaitEvent()
event.signal()
assert event.timed_wait(100)       # consumes the signal
assert not event.timed_wait(10)    # times out
```

```python
from sysutilkit.object_pool import ObjectPool

pool = ObjectPool(create=lambda key: bytearray(key))
pool.add(16, 4)
with pool.get(16) as buffer:
    ...  # a 16-byte bytearray; it goes back to the pool on exit
```

```python
from sysutilkit.timer_cache import DEFAULT_TIMER_CACHE_KEY, SteadyTimerCache

def on_timeout(error):
    if error is None:
        print("fired")

cache = SteadyTimerCache.instance()
cache.add(DEFAULT_TIMER_CACHE_KEY, 4)   # timers must be added before use
cache.queue_work_item_after(0.5, on_timeout)
```

## What it does not do

- `SqlDatabase` is an interface only: the package ships no database
  driver or concrete connection class. `SqlDatabasePool` works with
  implementations you supply through its `factories` mapping.
- Processor usage is read from `/proc/stat`, so `sysutilkit.diagnostics`
  and the thread pool's default usage probe need a Linux-style `/proc`;
  pass your own `usage_probe` to `ThreadPool` elsewhere.
- There is no command-line program.