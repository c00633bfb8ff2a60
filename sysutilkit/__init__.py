"""Concurrency primitives, object pools, a thread pool, timers and small system helpers."""

__version__ = "0.1.0"

__all__ = [
    "spin",
    "task_barrier",
    "wait_event",
    "tls",
    "resguard",
    "object_pool",
    "diagnostics",
    "path_helper",
    "thread_pool",
    "timer_cache",
    "type_list",
    "sql_database",
]