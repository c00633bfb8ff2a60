import threading

from sysutilkit.spin import SpinLock, default_backoff


def test_try_lock_only_succeeds_once():
    lock = SpinLock()
    assert lock.try_lock() is True
    assert lock.try_lock() is False
    lock.unlock()
    assert lock.try_lock() is True


def test_unlock_of_free_lock_is_harmless():
    lock = SpinLock()
    lock.unlock()
    assert lock.locked is False
    assert lock.try_lock() is True


def test_lock_calls_backoff_with_increasing_counts():
    counts = []
    lock = SpinLock()

    def backoff(count):
        counts.append(count)
        if count == 2:
            lock.unlock()

    spinner = SpinLock(backoff)
    spinner.try_lock()
    lock = spinner
    spinner.lock()
    assert counts == [0, 1, 2]
    assert spinner.locked is True


def test_context_manager_releases_on_exit():
    lock = SpinLock()
    with lock as held:
        assert held is lock
        assert lock.locked is True
    assert lock.locked is False


def test_context_manager_releases_on_error():
    lock = SpinLock()
    try:
        with lock:
            raise ValueError("boom")
    except ValueError:
        pass
    assert lock.try_lock() is True


def test_mutual_exclusion_across_threads():
    lock = SpinLock()
    total = {"value": 0}
    per_thread = 2000
    threads_count = 4

    def work():
        for _ in range(per_thread):
            with lock:
                current = total["value"]
                total["value"] = current + 1

    threads = [threading.Thread(target=work) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert total["value"] == per_thread * threads_count
    assert lock.locked is False
    assert lock.try_lock() is True


def test_default_backoff_returns_none_for_small_counts():
    assert default_backoff(0) is None
    assert default_backoff(20) is None