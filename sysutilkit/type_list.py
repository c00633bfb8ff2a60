"""Operations on ordered lists of types and typed values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple


@dataclass(frozen=True)
class TypedValue:
    """A constant value carried as a list element."""

    value: Any


def at(index: int, *args: Any) -> Any:
    """Return the element at ``index``.

    An index outside ``0 .. len(args) - 2`` yields the last element.
    """
    if not args:
        raise IndexError("at() needs at least one element")
    if 0 <= index < len(args):
        return args[index]
    return args[-1]


def search(element: Any, *args: Any) -> int:
    """Return the index of the first element equal to ``element``, or -1."""
    return next((i for i, candidate in enumerate(args) if candidate == element), -1)


def any_of(value: Any, *args: Any) -> bool:
    """Tell whether any :class:`TypedValue` in ``args`` holds ``value``."""
    for element in args:
        if not isinstance(element, TypedValue):
            raise TypeError(f"element {element!r} carries no value")
        if element.value == value:
            return True
    return False


def contains_type(checked: Any, *args: Any) -> bool:
    """Tell whether ``checked`` is one of ``args``."""
    return any(candidate == checked for candidate in args)


class TypeList:
    """An immutable ordered list of types or typed values."""

    __slots__ = ("_items",)

    def __init__(self, *args: Any) -> None:
        self._items: Tuple[Any, ...] = args

    @property
    def items(self) -> Tuple[Any, ...]:
        """The elements, in order."""
        return self._items

    def subtract_from(self, elements: Iterable[Any], removed: Iterable[Any]) -> "TypeList":
        """Combine ``elements`` minus ``removed`` with this list's elements.

        With nothing to remove, ``elements`` are placed before this list's
        elements in their given order. Otherwise each kept element is placed
        at the front in turn, so the kept elements come out reversed.
        """
        elements = tuple(elements)
        removed = tuple(removed)
        if not removed:
            return TypeList(*elements, *self._items)
        result = list(self._items)
        for element in elements:
            if search(element, *removed) == -1:
                result.insert(0, element)
        return TypeList(*result)

    def has(self, search_type: Any) -> bool:
        """Tell whether ``search_type`` is an element of this list."""
        return search(search_type, *self._items) != -1

    def is_empty(self) -> bool:
        """Tell whether the list has no elements."""
        return not self._items

    def contains_value(self, value: Any) -> bool:
        """Tell whether a typed value in this list holds ``value``."""
        return any_of(value, *self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeList):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"TypeList{self._items!r}"