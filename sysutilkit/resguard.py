"""Guard that releases a resource with a given deleter."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class ResGuard(Generic[T]):
    """Owns a resource and releases it with ``deleter`` when closed.

    A falsy resource is never passed to the deleter.
    """

    def __init__(self, obj: Optional[T], deleter: Optional[Callable[[T], Any]]) -> None:
        self._obj = obj
        self._deleter = deleter

    def get(self) -> Optional[T]:
        """Return the guarded resource."""
        return self._obj

    def swap(self, other: "ResGuard[T]") -> None:
        """Exchange resources and deleters with ``other``."""
        self._obj, other._obj = other._obj, self._obj
        self._deleter, other._deleter = other._deleter, self._deleter

    def close(self) -> None:
        """Release the resource; later calls do nothing."""
        obj, self._obj = self._obj, None
        if obj and self._deleter is not None:
            self._deleter(obj)

    def __enter__(self) -> "ResGuard[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()