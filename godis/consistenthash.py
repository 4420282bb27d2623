"""Consistent hashing ring with virtual replicas and hash-tag support."""

from __future__ import annotations

import bisect
import zlib
from typing import Callable

HashFunc = Callable[[bytes], int]


def get_partition_key(key: str) -> str:
    """Return the ``{tag}`` part of a key, or the key itself when there is none."""
    beg = key.find("{")
    if beg == -1:
        return key
    end = key.find("}")
    if end == -1 or end == beg + 1:
        return key
    return key[beg + 1 : end]


class HashRing:
    """Nodes placed on a hash circle; keys go to the next node clockwise."""

    def __init__(self, replicas: int, hash_func: HashFunc | None = None) -> None:
        self._replicas = replicas
        self._hash_func: HashFunc = hash_func or zlib.crc32
        self._keys: list[int] = []
        self._hash_map: dict[int, str] = {}

    def is_empty(self) -> bool:
        return not self._keys

    def add_node(self, *nodes: str) -> None:
        """Add nodes to the ring; empty names are ignored."""
        for node in nodes:
            if not node:
                continue
            for i in range(self._replicas):
                h = self._hash_func(f"{i}{node}".encode())
                self._keys.append(h)
                self._hash_map[h] = node
        self._keys.sort()

    def pick_node(self, key: str) -> str:
        """Return the node responsible for ``key``, or ``""`` on an empty ring."""
        if self.is_empty():
            return ""
        h = self._hash_func(get_partition_key(key).encode())
        idx = bisect.bisect_left(self._keys, h)
        if idx == len(self._keys):
            idx = 0
        return self._hash_map[self._keys[idx]]