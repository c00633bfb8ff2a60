from sysutilkit.resguard import ResGuard


def test_get_returns_resource():
    guard = ResGuard("handle", lambda obj: None)
    assert guard.get() == "handle"


def test_context_manager_releases_resource():
    released = []
    with ResGuard("handle", released.append) as guard:
        assert released == []
        assert guard.get() == "handle"
    assert released == ["handle"]


def test_falsy_resource_is_not_released():
    released = []
    with ResGuard(None, released.append):
        pass
    with ResGuard(0, released.append):
        pass
    assert released == []


def test_close_is_idempotent():
    released = []
    guard = ResGuard("handle", released.append)
    guard.close()
    guard.close()
    assert released == ["handle"]
    assert guard.get() is None


def test_swap_exchanges_resources_and_deleters():
    first_released = []
    second_released = []
    first = ResGuard("a", first_released.append)
    second = ResGuard("b", second_released.append)
    first.swap(second)
    assert (first.get(), second.get()) == ("b", "a")
    first.close()
    second.close()
    assert second_released == ["b"]
    assert first_released == ["a"]


def test_swap_with_empty_guard_transfers_ownership():
    released = []
    owner = ResGuard("res", released.append)
    empty = ResGuard(None, None)
    empty.swap(owner)
    owner.close()
    assert released == []
    empty.close()
    assert released == ["res"]