"""A sorted set: members with scores, ordered by score then member."""

from __future__ import annotations

import math
from typing import Iterator, Optional

from godis.border import (
    SCORE_NEGATIVE_INF_BORDER,
    SCORE_POSITIVE_INF_BORDER,
    Border,
    Element,
    ScoreBorder,
)
from godis.skiplist import Node, Skiplist
from godis.wildcard import compile_pattern


def _format_score(score: float) -> str:
    if math.isnan(score):
        return "NaN"
    if math.isinf(score):
        return "+Inf" if score > 0 else "-Inf"
    return f"{score:.10f}"


class SortedSet:
    """Members bound to scores; ranks start from 0."""

    def __init__(self) -> None:
        self._dict: dict[str, Element] = {}
        self._skiplist = Skiplist()

    def add(self, member: str, score: float) -> bool:
        """Set the member's score; return True when the member is new."""
        old = self._dict.get(member)
        self._dict[member] = Element(member, score)
        if old is not None:
            if score != old.score:
                self._skiplist.remove(member, old.score)
                self._skiplist.insert(member, score)
            return False
        self._skiplist.insert(member, score)
        return True

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, member: object) -> bool:
        return member in self._dict

    def get(self, member: str) -> Optional[Element]:
        """Return the member's element, or ``None``."""
        return self._dict.get(member)

    def remove(self, member: str) -> bool:
        """Remove the member; return whether it was present."""
        element = self._dict.pop(member, None)
        if element is None:
            return False
        self._skiplist.remove(member, element.score)
        return True

    def get_rank(self, member: str, desc: bool) -> int:
        """Return the 0-based rank of the member, or -1 when absent."""
        element = self._dict.get(member)
        if element is None:
            return -1
        r = self._skiplist.get_rank(member, element.score)
        return self._skiplist.length - r if desc else r - 1

    def iter_by_rank(self, start: int, stop: int, desc: bool) -> Iterator[Element]:
        """Yield elements with rank in ``[start, stop)``."""
        size = len(self)
        if start < 0 or start >= size:
            raise IndexError(f"illegal start {start}")
        if stop < start or stop > size:
            raise IndexError(f"illegal end {stop}")
        return self._iter_by_rank(start, stop, desc, size)

    def _iter_by_rank(self, start: int, stop: int, desc: bool, size: int) -> Iterator[Element]:
        sl = self._skiplist
        node: Optional[Node]
        if desc:
            node = sl.get_by_rank(size - start) if start > 0 else sl.tail
        else:
            node = sl.get_by_rank(start + 1) if start > 0 else sl.header.level[0].forward
        for _ in range(stop - start):
            yield node.element
            node = node.backward if desc else node.level[0].forward

    def range_by_rank(self, start: int, stop: int, desc: bool) -> list[Element]:
        """Return elements with rank in ``[start, stop)``."""
        return list(self.iter_by_rank(start, stop, desc))

    def range_count(self, min_border: Border, max_border: Border) -> int:
        """Count the elements between the two borders."""
        if not self._dict:
            return 0
        count = 0
        for element in self.iter_by_rank(0, len(self), False):
            if not min_border.less(element):
                continue
            if not max_border.greater(element):
                break
            count += 1
        return count

    def iter_range(
        self,
        min_border: Border,
        max_border: Border,
        offset: int,
        limit: int,
        desc: bool,
    ) -> Iterator[Element]:
        """Yield elements between the borders after skipping ``offset``; negative ``limit`` means all."""
        sl = self._skiplist
        if desc:
            node = sl.get_last_in_range(min_border, max_border)
        else:
            node = sl.get_first_in_range(min_border, max_border)

        while node is not None and offset > 0:
            node = node.backward if desc else node.level[0].forward
            offset -= 1

        yielded = 0
        while (limit < 0 or yielded < limit) and node is not None:
            yield node.element
            yielded += 1
            node = node.backward if desc else node.level[0].forward
            if node is None:
                break
            if not min_border.less(node.element) or not max_border.greater(node.element):
                break

    def range(
        self,
        min_border: Border,
        max_border: Border,
        offset: int,
        limit: int,
        desc: bool,
    ) -> list[Element]:
        """Return elements between the borders; negative ``limit`` means no limit."""
        if limit == 0 or offset < 0:
            return []
        return list(self.iter_range(min_border, max_border, offset, limit, desc))

    def remove_range(self, min_border: Border, max_border: Border) -> int:
        """Remove elements between the borders; return how many."""
        removed = self._skiplist.remove_range(min_border, max_border, 0)
        for element in removed:
            self._dict.pop(element.member, None)
        return len(removed)

    def pop_min(self, count: int) -> list[Element]:
        """Remove and return up to ``count`` lowest-scored elements."""
        first = self._skiplist.get_first_in_range(
            SCORE_NEGATIVE_INF_BORDER, SCORE_POSITIVE_INF_BORDER
        )
        if first is None:
            return []
        border = ScoreBorder(value=first.score, exclude=False)
        removed = self._skiplist.remove_range(border, SCORE_POSITIVE_INF_BORDER, count)
        for element in removed:
            self._dict.pop(element.member, None)
        return removed

    def remove_by_rank(self, start: int, stop: int) -> int:
        """Remove elements with 0-based rank in ``[start, stop)``; return how many."""
        removed = self._skiplist.remove_range_by_rank(start + 1, stop + 1)
        for element in removed:
            self._dict.pop(element.member, None)
        return len(removed)

    def scan(self, cursor: int, count: int, pattern: str) -> tuple[list[bytes], int]:
        """Return matching members each followed by its score; the cursor is always 0."""
        matcher = compile_pattern(pattern)
        result: list[bytes] = []
        for member, element in list(self._dict.items()):
            if pattern == "*" or matcher.is_match(member):
                result.append(member.encode())
                result.append(_format_score(element.score).encode())
        return result, 0

    def __repr__(self) -> str:
        return f"SortedSet(len={len(self)})"