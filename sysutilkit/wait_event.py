"""Auto-resetting event for synchronising threads."""

from __future__ import annotations

import enum
import threading
import time
from typing import Any, Callable, Optional


class _Status(enum.Enum):
    NORMAL = enum.auto()
    SIGNALED = enum.auto()
    ERROR = enum.auto()


def _run_pre_action(action: Optional[Callable[[], Any]]) -> bool:
    """Run a pre-action; a result of None counts as permission to proceed."""
    if action is None:
        return True
    result = action()
    return True if result is None else bool(result)


class WaitEvent:
    """An event that wakes one waiter and returns to the normal state.

    A signal sent while nobody waits is kept until the next wait.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._status = _Status.NORMAL

    def wait(self, post_wait_act: Optional[Callable[[], Any]] = None) -> None:
        """Block until signalled; run ``post_wait_act`` while still holding the lock."""
        with self._cond:
            while self._status is not _Status.SIGNALED:
                self._cond.wait()
            self._status = _Status.NORMAL
            if post_wait_act is not None:
                post_wait_act()

    def timed_wait(
        self,
        milliseconds: int,
        post_wait_act: Optional[Callable[[bool], Any]] = None,
    ) -> bool:
        """Block until signalled or until ``milliseconds`` have passed.

        Returns True if the event was signalled, False on timeout.
        ``post_wait_act`` receives the same value before the call returns.
        """
        deadline = time.monotonic() + milliseconds / 1000.0
        with self._cond:
            result = True
            while self._status is not _Status.SIGNALED:
                remaining = deadline - time.monotonic()
                if remaining <= 0 or not self._cond.wait(remaining):
                    if self._status is _Status.SIGNALED:
                        break
                    result = False
                    break
            if result:
                self._status = _Status.NORMAL
            if post_wait_act is not None:
                post_wait_act(result)
            return result

    def signal(self, pre_signal_act: Optional[Callable[[], Any]] = None) -> None:
        """Signal the event and wake one waiter.

        If ``pre_signal_act`` returns a false value (other than None) the
        event is left untouched.
        """
        with self._cond:
            if _run_pre_action(pre_signal_act):
                self._status = _Status.SIGNALED
                self._cond.notify()

    def reset(self, pre_reset_act: Optional[Callable[[], Any]] = None) -> None:
        """Return the event to the normal, unsignalled state."""
        with self._cond:
            if pre_reset_act is not None:
                pre_reset_act()
            self._status = _Status.NORMAL

    def __bool__(self) -> bool:
        return self._status is not _Status.ERROR