"""The list interface and a doubly linked list implementing it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator

Expected = Callable[[Any], bool]


class List(ABC):
    """An ordered sequence of values addressed by position."""

    @abstractmethod
    def add(self, val: Any) -> None:
        """Append ``val`` at the tail."""

    @abstractmethod
    def get(self, index: int) -> Any:
        """Return the value at ``index``."""

    @abstractmethod
    def set(self, index: int, val: Any) -> None:
        """Replace the value at ``index``."""

    @abstractmethod
    def insert(self, index: int, val: Any) -> None:
        """Insert ``val`` before the element at ``index``; ``index == len`` appends."""

    @abstractmethod
    def remove(self, index: int) -> Any:
        """Remove and return the value at ``index``."""

    @abstractmethod
    def remove_last(self) -> Any:
        """Remove and return the last value, or ``None`` when empty."""

    @abstractmethod
    def remove_all_by_val(self, expected: Expected) -> int:
        """Remove every value for which ``expected`` is true; return how many."""

    @abstractmethod
    def remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove at most ``count`` matching values scanning from the head."""

    @abstractmethod
    def reverse_remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove at most ``count`` matching values scanning from the tail."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __iter__(self) -> Iterator[Any]: ...

    @abstractmethod
    def contains(self, expected: Expected) -> bool:
        """Return whether any value satisfies ``expected``."""

    @abstractmethod
    def range(self, start: int, stop: int) -> list[Any]:
        """Return the values with index in ``[start, stop)``."""


class _Node:
    __slots__ = ("val", "prev", "next")

    def __init__(self, val: Any) -> None:
        self.val = val
        self.prev: _Node | None = None
        self.next: _Node | None = None


class LinkedList(List):
    """A doubly linked list."""

    def __init__(self, *vals: Any) -> None:
        self._first: _Node | None = None
        self._last: _Node | None = None
        self._size = 0
        for val in vals:
            self.add(val)

    def add(self, val: Any) -> None:
        n = _Node(val)
        if self._last is None:
            self._first = n
            self._last = n
        else:
            n.prev = self._last
            self._last.next = n
            self._last = n
        self._size += 1

    def _find(self, index: int) -> _Node:
        if index < self._size // 2:
            n = self._first
            for _ in range(index):
                n = n.next
        else:
            n = self._last
            for _ in range(self._size - 1 - index):
                n = n.prev
        return n

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise IndexError("index out of bound")

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self._find(index).val

    def set(self, index: int, val: Any) -> None:
        self._check_index(index)
        self._find(index).val = val

    def insert(self, index: int, val: Any) -> None:
        if index < 0 or index > self._size:
            raise IndexError("index out of bound")
        if index == self._size:
            self.add(val)
            return
        pivot = self._find(index)
        n = _Node(val)
        n.prev = pivot.prev
        n.next = pivot
        if pivot.prev is None:
            self._first = n
        else:
            pivot.prev.next = n
        pivot.prev = n
        self._size += 1

    def _remove_node(self, n: _Node) -> None:
        if n.prev is None:
            self._first = n.next
        else:
            n.prev.next = n.next
        if n.next is None:
            self._last = n.prev
        else:
            n.next.prev = n.prev
        n.prev = None
        n.next = None
        self._size -= 1

    def remove(self, index: int) -> Any:
        self._check_index(index)
        n = self._find(index)
        self._remove_node(n)
        return n.val

    def remove_last(self) -> Any:
        if self._last is None:
            return None
        n = self._last
        self._remove_node(n)
        return n.val

    def remove_all_by_val(self, expected: Expected) -> int:
        n = self._first
        removed = 0
        while n is not None:
            next_node = n.next
            if expected(n.val):
                self._remove_node(n)
                removed += 1
            n = next_node
        return removed

    def remove_by_val(self, expected: Expected, count: int) -> int:
        n = self._first
        removed = 0
        while n is not None:
            next_node = n.next
            if expected(n.val):
                self._remove_node(n)
                removed += 1
            if removed == count:
                break
            n = next_node
        return removed

    def reverse_remove_by_val(self, expected: Expected, count: int) -> int:
        n = self._last
        removed = 0
        while n is not None:
            prev_node = n.prev
            if expected(n.val):
                self._remove_node(n)
                removed += 1
            if removed == count:
                break
            n = prev_node
        return removed

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        n = self._first
        while n is not None:
            nxt = n.next
            yield n.val
            n = nxt

    def contains(self, expected: Expected) -> bool:
        return any(expected(val) for val in self)

    def range(self, start: int, stop: int) -> list[Any]:
        if start < 0 or start >= self._size:
            raise IndexError("`start` out of range")
        if stop < start or stop > self._size:
            raise IndexError("`stop` out of range")
        result: list[Any] = []
        for i, val in enumerate(self):
            if i >= stop:
                break
            if i >= start:
                result.append(val)
        return result

    def __repr__(self) -> str:
        return f"LinkedList({', '.join(repr(v) for v in self)})"