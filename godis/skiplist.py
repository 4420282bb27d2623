"""A skip list ordered by score then member, with rank bookkeeping."""

from __future__ import annotations

import random
from typing import Optional

from godis.border import Border, Element

MAX_LEVEL = 16


class _Level:
    __slots__ = ("forward", "span")

    def __init__(self) -> None:
        self.forward: Optional[Node] = None
        self.span = 0


class Node:
    """A skip list node holding an element and its forward links per level."""

    __slots__ = ("element", "backward", "level")

    def __init__(self, level: int, score: float, member: str) -> None:
        self.element = Element(member, score)
        self.backward: Optional[Node] = None
        self.level = [_Level() for _ in range(level)]

    @property
    def member(self) -> str:
        return self.element.member

    @property
    def score(self) -> float:
        return self.element.score

    def __repr__(self) -> str:
        return f"Node({self.element.member!r}, {self.element.score!r})"


def random_level() -> int:
    """Pick a level in ``[1, MAX_LEVEL]``; each higher level is half as likely."""
    total = (1 << MAX_LEVEL) - 1
    k = random.getrandbits(64) % total
    return MAX_LEVEL - (k + 1).bit_length() + 1


def _before(node: Node, score: float, member: str) -> bool:
    return node.score < score or (node.score == score and node.member < member)


class Skiplist:
    """Elements sorted by ``(score, member)``; ranks are 1-based."""

    def __init__(self) -> None:
        self.header = Node(MAX_LEVEL, 0.0, "")
        self.tail: Optional[Node] = None
        self.length = 0
        self.level = 1

    def __len__(self) -> int:
        return self.length

    def insert(self, member: str, score: float) -> Node:
        """Insert a new node; the member must not already be present."""
        update: list[Optional[Node]] = [None] * MAX_LEVEL
        rank = [0] * MAX_LEVEL

        node = self.header
        for i in range(self.level - 1, -1, -1):
            rank[i] = 0 if i == self.level - 1 else rank[i + 1]
            fwd = node.level[i].forward
            while fwd is not None and _before(fwd, score, member):
                rank[i] += node.level[i].span
                node = fwd
                fwd = node.level[i].forward
            update[i] = node

        level = random_level()
        if level > self.level:
            for i in range(self.level, level):
                rank[i] = 0
                update[i] = self.header
                self.header.level[i].span = self.length
            self.level = level

        new = Node(level, score, member)
        for i in range(level):
            prev = update[i]
            new.level[i].forward = prev.level[i].forward
            prev.level[i].forward = new
            new.level[i].span = prev.level[i].span - (rank[0] - rank[i])
            prev.level[i].span = (rank[0] - rank[i]) + 1

        for i in range(level, self.level):
            update[i].level[i].span += 1

        new.backward = None if update[0] is self.header else update[0]
        if new.level[0].forward is not None:
            new.level[0].forward.backward = new
        else:
            self.tail = new
        self.length += 1
        return new

    def _remove_node(self, node: Node, update: list[Optional[Node]]) -> None:
        for i in range(self.level):
            prev = update[i]
            if prev.level[i].forward is node:
                prev.level[i].span += node.level[i].span - 1
                prev.level[i].forward = node.level[i].forward
            else:
                prev.level[i].span -= 1
        if node.level[0].forward is not None:
            node.level[0].forward.backward = node.backward
        else:
            self.tail = node.backward
        while self.level > 1 and self.header.level[self.level - 1].forward is None:
            self.level -= 1
        self.length -= 1

    def remove(self, member: str, score: float) -> bool:
        """Remove the node with this member and score; return whether one was found."""
        update: list[Optional[Node]] = [None] * MAX_LEVEL
        node = self.header
        for i in range(self.level - 1, -1, -1):
            fwd = node.level[i].forward
            while fwd is not None and _before(fwd, score, member):
                node = fwd
                fwd = node.level[i].forward
            update[i] = node
        target = node.level[0].forward
        if target is not None and target.score == score and target.member == member:
            self._remove_node(target, update)
            return True
        return False

    def get_rank(self, member: str, score: float) -> int:
        """Return the 1-based rank of the member, or 0 when it is absent."""
        rank = 0
        x = self.header
        for i in range(self.level - 1, -1, -1):
            fwd = x.level[i].forward
            while fwd is not None and (
                fwd.score < score or (fwd.score == score and fwd.member <= member)
            ):
                rank += x.level[i].span
                x = fwd
                fwd = x.level[i].forward
            if x.member == member:
                return rank
        return 0

    def get_by_rank(self, rank: int) -> Optional[Node]:
        """Return the node at the 1-based ``rank``, or ``None``."""
        i = 0
        n = self.header
        for level in range(self.level - 1, -1, -1):
            while n.level[level].forward is not None and i + n.level[level].span <= rank:
                i += n.level[level].span
                n = n.level[level].forward
            if i == rank:
                return n
        return None

    def has_in_range(self, min_border: Border, max_border: Border) -> bool:
        """Return whether any element may lie between the two borders."""
        if min_border.is_intersected(max_border):
            return False
        n = self.tail
        if n is None or not min_border.less(n.element):
            return False
        n = self.header.level[0].forward
        if n is None or not max_border.greater(n.element):
            return False
        return True

    def get_first_in_range(self, min_border: Border, max_border: Border) -> Optional[Node]:
        """Return the smallest node within the borders, or ``None``."""
        if not self.has_in_range(min_border, max_border):
            return None
        n = self.header
        for level in range(self.level - 1, -1, -1):
            while n.level[level].forward is not None and not min_border.less(
                n.level[level].forward.element
            ):
                n = n.level[level].forward
        n = n.level[0].forward
        if n is None or not max_border.greater(n.element):
            return None
        return n

    def get_last_in_range(self, min_border: Border, max_border: Border) -> Optional[Node]:
        """Return the largest node within the borders, or ``None``."""
        if not self.has_in_range(min_border, max_border):
            return None
        n = self.header
        for level in range(self.level - 1, -1, -1):
            while n.level[level].forward is not None and max_border.greater(
                n.level[level].forward.element
            ):
                n = n.level[level].forward
        if not min_border.less(n.element):
            return None
        return n

    def remove_range(self, min_border: Border, max_border: Border, limit: int) -> list[Element]:
        """Remove elements within the borders, at most ``limit`` when positive."""
        update: list[Optional[Node]] = [None] * MAX_LEVEL
        removed: list[Element] = []
        node = self.header
        for i in range(self.level - 1, -1, -1):
            while node.level[i].forward is not None:
                if min_border.less(node.level[i].forward.element):
                    break
                node = node.level[i].forward
            update[i] = node

        current = node.level[0].forward
        while current is not None:
            if not max_border.greater(current.element):
                break
            nxt = current.level[0].forward
            removed.append(current.element)
            self._remove_node(current, update)
            if limit > 0 and len(removed) == limit:
                break
            current = nxt
        return removed

    def remove_range_by_rank(self, start: int, stop: int) -> list[Element]:
        """Remove elements with 1-based rank in ``[start, stop)``."""
        i = 0
        update: list[Optional[Node]] = [None] * MAX_LEVEL
        removed: list[Element] = []
        node = self.header
        for level in range(self.level - 1, -1, -1):
            while node.level[level].forward is not None and i + node.level[level].span < start:
                i += node.level[level].span
                node = node.level[level].forward
            update[level] = node

        i += 1
        current = node.level[0].forward
        while current is not None and i < stop:
            nxt = current.level[0].forward
            removed.append(current.element)
            self._remove_node(current, update)
            current = nxt
            i += 1
        return removed