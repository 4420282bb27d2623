"""A set of strings backed by a hash dictionary."""

from __future__ import annotations

from collections import Counter
from typing import Iterator

from godis.dicts import SimpleDict
from godis.wildcard import compile_pattern


class StrSet:
    """An unordered collection of distinct strings."""

    def __init__(self, *members: str) -> None:
        self._dict = SimpleDict()
        for member in members:
            self.add(member)

    def add(self, val: str) -> int:
        """Add ``val``; return 1 if it was new, else 0."""
        return self._dict.put(val, None)

    def remove(self, val: str) -> int:
        """Remove ``val``; return 1 if it was present, else 0."""
        _, removed = self._dict.remove(val)
        return removed

    def __contains__(self, val: object) -> bool:
        return val in self._dict

    def __len__(self) -> int:
        return len(self._dict)

    def __iter__(self) -> Iterator[str]:
        for key, _ in self._dict.items():
            yield key

    def to_list(self) -> list[str]:
        """Return the members as a list."""
        return list(self)

    def shallow_copy(self) -> "StrSet":
        """Return a new set holding the same members."""
        return StrSet(*self)

    def random_members(self, limit: int) -> list[str]:
        """Return ``limit`` random members, possibly repeated."""
        return self._dict.random_keys(limit)

    def random_distinct_members(self, limit: int) -> list[str]:
        """Return up to ``limit`` distinct random members."""
        return self._dict.random_distinct_keys(limit)

    def scan(self, cursor: int, count: int, pattern: str) -> tuple[list[bytes], int]:
        """Return all members matching ``pattern`` and the next cursor, always 0."""
        matcher = compile_pattern(pattern)
        result = [
            member.encode()
            for member in self
            if pattern == "*" or matcher.is_match(member)
        ]
        return result, 0

    def __repr__(self) -> str:
        return f"StrSet({', '.join(repr(m) for m in self)})"


def intersect(*sets: StrSet) -> StrSet:
    """Return the members present in every given set."""
    result = StrSet()
    if not sets:
        return result
    counts: Counter[str] = Counter()
    for s in sets:
        counts.update(s)
    for member, n in counts.items():
        if n == len(sets):
            result.add(member)
    return result


def union(*sets: StrSet) -> StrSet:
    """Return the members present in any given set."""
    result = StrSet()
    for s in sets:
        for member in s:
            result.add(member)
    return result


def diff(*sets: StrSet) -> StrSet:
    """Return the members of the first set absent from all the others."""
    if not sets:
        return StrSet()
    result = sets[0].shallow_copy()
    for s in sets[1:]:
        for member in s:
            result.remove(member)
        if len(result) == 0:
            break
    return result