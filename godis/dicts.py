"""Key-value dictionaries: a plain one and a sharded thread-safe one."""

from __future__ import annotations

import random
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator

from godis.lockmap import RWLock, fnv32
from godis.wildcard import compile_pattern


def compute_capacity(param: int) -> int:
    """Round a requested shard count up to a power of two, at least 16."""
    if param <= 16:
        return 16
    n = param - 1
    for shift in (1, 2, 4, 8, 16):
        n |= n >> shift
    return n + 1


class Dict(ABC):
    """A mapping from string keys to arbitrary values."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the value bound to ``key``, or ``None`` when absent."""

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __contains__(self, key: object) -> bool: ...

    @abstractmethod
    def put(self, key: str, val: Any) -> int:
        """Bind ``key``; return 1 if it was newly inserted, else 0."""

    @abstractmethod
    def put_if_absent(self, key: str, val: Any) -> int:
        """Bind ``key`` only when absent; return the number inserted."""

    @abstractmethod
    def put_if_exists(self, key: str, val: Any) -> int:
        """Rebind ``key`` only when present; return the number updated."""

    @abstractmethod
    def remove(self, key: str) -> tuple[Any, int]:
        """Remove ``key``; return ``(old value, number removed)``."""

    @abstractmethod
    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(key, value)`` pairs."""

    @abstractmethod
    def keys(self) -> list[str]: ...

    @abstractmethod
    def random_keys(self, limit: int) -> list[str]:
        """Return ``limit`` random keys, possibly repeated."""

    @abstractmethod
    def random_distinct_keys(self, limit: int) -> list[str]:
        """Return up to ``limit`` distinct random keys."""

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def scan(self, cursor: int, count: int, pattern: str) -> tuple[list[bytes], int]:
        """Return a batch of matching entries and the next cursor (0 when done)."""

    def __iter__(self) -> Iterator[str]:
        for key, _ in self.items():
            yield key


class SimpleDict(Dict):
    """A dictionary without any locking."""

    def __init__(self) -> None:
        self._m: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._m.get(key)

    def __len__(self) -> int:
        return len(self._m)

    def __contains__(self, key: object) -> bool:
        return key in self._m

    def put(self, key: str, val: Any) -> int:
        existed = key in self._m
        self._m[key] = val
        return 0 if existed else 1

    def put_if_absent(self, key: str, val: Any) -> int:
        if key in self._m:
            return 0
        self._m[key] = val
        return 1

    def put_if_exists(self, key: str, val: Any) -> int:
        if key in self._m:
            self._m[key] = val
            return 1
        return 0

    def remove(self, key: str) -> tuple[Any, int]:
        if key in self._m:
            return self._m.pop(key), 1
        return None, 0

    def items(self) -> Iterator[tuple[str, Any]]:
        yield from list(self._m.items())

    def keys(self) -> list[str]:
        return list(self._m)

    def random_keys(self, limit: int) -> list[str]:
        keys = list(self._m)
        if not keys:
            return []
        return [random.choice(keys) for _ in range(limit)]

    def random_distinct_keys(self, limit: int) -> list[str]:
        keys = list(self._m)
        return random.sample(keys, min(limit, len(keys)))

    def clear(self) -> None:
        self._m = {}

    def scan(self, cursor: int, count: int, pattern: str) -> tuple[list[bytes], int]:
        """Return matching keys each followed by its byte value; always completes."""
        matcher = compile_pattern(pattern)
        result: list[bytes] = []
        for key, raw in list(self._m.items()):
            if pattern == "*" or matcher.is_match(key):
                if not isinstance(raw, (bytes, bytearray)):
                    raise TypeError(f"value of {key!r} is not bytes")
                result.append(key.encode())
                result.append(bytes(raw))
        return result, 0


class _Shard:
    __slots__ = ("m", "lock")

    def __init__(self) -> None:
        self.m: dict[str, Any] = {}
        self.lock = RWLock()

    def random_key(self) -> str | None:
        self.lock.acquire_read()
        try:
            if not self.m:
                return None
            return random.choice(list(self.m))
        finally:
            self.lock.release_read()


class ConcurrentDict(Dict):
    """A thread-safe dictionary split into independently locked shards.

    The ``*_with_lock`` methods do no locking themselves; callers must hold
    the shard locks through :meth:`rw_locks`.
    """

    def __init__(self, shard_count: int) -> None:
        self._shard_count = compute_capacity(shard_count)
        self._table = [_Shard() for _ in range(self._shard_count)]
        self._count = 0
        self._count_lock = threading.Lock()

    def _index(self, key: str) -> int:
        return (len(self._table) - 1) & fnv32(key)

    def _shard(self, key: str) -> _Shard:
        return self._table[self._index(key)]

    def _add_count(self, delta: int) -> None:
        with self._count_lock:
            self._count += delta

    def get(self, key: str) -> Any:
        s = self._shard(key)
        s.lock.acquire_read()
        try:
            return s.m.get(key)
        finally:
            s.lock.release_read()

    def get_with_lock(self, key: str) -> Any:
        return self._shard(key).m.get(key)

    def __len__(self) -> int:
        with self._count_lock:
            return self._count

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        s = self._shard(key)
        s.lock.acquire_read()
        try:
            return key in s.m
        finally:
            s.lock.release_read()

    def _put(self, s: _Shard, key: str, val: Any) -> int:
        if key in s.m:
            s.m[key] = val
            return 0
        s.m[key] = val
        self._add_count(1)
        return 1

    def _put_if_absent(self, s: _Shard, key: str, val: Any) -> int:
        if key in s.m:
            return 0
        s.m[key] = val
        self._add_count(1)
        return 1

    @staticmethod
    def _put_if_exists(s: _Shard, key: str, val: Any) -> int:
        if key in s.m:
            s.m[key] = val
            return 1
        return 0

    def _remove(self, s: _Shard, key: str) -> tuple[Any, int]:
        if key in s.m:
            val = s.m.pop(key)
            self._add_count(-1)
            return val, 1
        return None, 0

    def _locked(self, key: str, op, *args):
        s = self._shard(key)
        s.lock.acquire_write()
        try:
            return op(s, key, *args)
        finally:
            s.lock.release_write()

    def put(self, key: str, val: Any) -> int:
        return self._locked(key, self._put, val)

    def put_with_lock(self, key: str, val: Any) -> int:
        return self._put(self._shard(key), key, val)

    def put_if_absent(self, key: str, val: Any) -> int:
        return self._locked(key, self._put_if_absent, val)

    def put_if_absent_with_lock(self, key: str, val: Any) -> int:
        return self._put_if_absent(self._shard(key), key, val)

    def put_if_exists(self, key: str, val: Any) -> int:
        return self._locked(key, self._put_if_exists, val)

    def put_if_exists_with_lock(self, key: str, val: Any) -> int:
        return self._put_if_exists(self._shard(key), key, val)

    def remove(self, key: str) -> tuple[Any, int]:
        return self._locked(key, self._remove)

    def remove_with_lock(self, key: str) -> tuple[Any, int]:
        return self._remove(self._shard(key), key)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield entries shard by shard; entries added meanwhile may be missed."""
        for s in self._table:
            s.lock.acquire_read()
            try:
                snapshot = list(s.m.items())
            finally:
                s.lock.release_read()
            yield from snapshot

    def keys(self) -> list[str]:
        return [key for key, _ in self.items()]

    def random_keys(self, limit: int) -> list[str]:
        if limit >= len(self):
            return self.keys()
        result: list[str] = []
        while len(result) < limit:
            key = random.choice(self._table).random_key()
            if key is not None:
                result.append(key)
        return result

    def random_distinct_keys(self, limit: int) -> list[str]:
        if limit >= len(self):
            return self.keys()
        result: set[str] = set()
        while len(result) < limit:
            key = random.choice(self._table).random_key()
            if key is not None:
                result.add(key)
        return list(result)

    def clear(self) -> None:
        self._table = [_Shard() for _ in range(self._shard_count)]
        with self._count_lock:
            self._count = 0

    def _lock_plan(
        self, write_keys: Iterable[str], read_keys: Iterable[str] | None, reverse: bool
    ) -> list[tuple[RWLock, bool]]:
        write_keys = list(write_keys or ())
        read_keys = list(read_keys or ())
        write_indices = {self._index(k) for k in write_keys}
        indices = sorted({self._index(k) for k in write_keys + read_keys}, reverse=reverse)
        return [(self._table[i].lock, i in write_indices) for i in indices]

    def rw_locks(self, write_keys: Iterable[str], read_keys: Iterable[str] | None) -> None:
        """Lock the shards of write keys exclusively and of read keys shared."""
        for lock, write in self._lock_plan(write_keys, read_keys, reverse=False):
            if write:
                lock.acquire_write()
            else:
                lock.acquire_read()

    def rw_unlocks(self, write_keys: Iterable[str], read_keys: Iterable[str] | None) -> None:
        """Release shard locks taken by :meth:`rw_locks` with the same keys."""
        for lock, write in self._lock_plan(write_keys, read_keys, reverse=True):
            if write:
                lock.release_write()
            else:
                lock.release_read()

    def scan(self, cursor: int, count: int, pattern: str) -> tuple[list[bytes], int]:
        """Return matching keys from whole shards starting at shard ``cursor``."""
        if pattern == "*" and count >= len(self):
            return [key.encode() for key in self.keys()], 0
        matcher = compile_pattern(pattern)
        result: list[bytes] = []
        for shard_index in range(cursor, len(self._table)):
            s = self._table[shard_index]
            s.lock.acquire_read()
            try:
                if len(result) + len(s.m) > count and shard_index > cursor:
                    return result, shard_index
                result.extend(
                    key.encode()
                    for key in s.m
                    if pattern == "*" or matcher.is_match(key)
                )
            finally:
                s.lock.release_read()
        return result, 0