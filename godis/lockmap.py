"""Striped read-write locks keyed by string."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator

_OFFSET32 = 2166136261
_PRIME32 = 16777619


def fnv32(key: str) -> int:
    """32-bit FNV-1 hash of the UTF-8 bytes of ``key``."""
    h = _OFFSET32
    for byte in key.encode():
        h = (h * _PRIME32) & 0xFFFFFFFF
        h ^= byte
    return h


class RWLock:
    """A non-reentrant read-write lock that lets waiting writers go first."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release of unlocked read lock")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release of unlocked write lock")
            self._writer = False
            self._cond.notify_all()


class Locks:
    """A fixed table of read-write locks; keys map onto it by hash."""

    def __init__(self, table_size: int) -> None:
        self._table = [RWLock() for _ in range(table_size)]

    def _index(self, key: str) -> int:
        return (len(self._table) - 1) & fnv32(key)

    def _indices(self, keys: Iterable[str], reverse: bool) -> list[int]:
        return sorted({self._index(key) for key in keys}, reverse=reverse)

    def lock(self, key: str) -> None:
        """Take the exclusive lock for ``key``."""
        self._table[self._index(key)].acquire_write()

    def rlock(self, key: str) -> None:
        """Take the shared lock for ``key``."""
        self._table[self._index(key)].acquire_read()

    def unlock(self, key: str) -> None:
        self._table[self._index(key)].release_write()

    def runlock(self, key: str) -> None:
        self._table[self._index(key)].release_read()

    def locks(self, *keys: str) -> None:
        """Take exclusive locks for several keys in a deadlock-free order."""
        for index in self._indices(keys, reverse=False):
            self._table[index].acquire_write()

    def rlocks(self, *keys: str) -> None:
        """Take shared locks for several keys in a deadlock-free order."""
        for index in self._indices(keys, reverse=False):
            self._table[index].acquire_read()

    def unlocks(self, *keys: str) -> None:
        for index in self._indices(keys, reverse=True):
            self._table[index].release_write()

    def runlocks(self, *keys: str) -> None:
        for index in self._indices(keys, reverse=True):
            self._table[index].release_read()

    def rw_locks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Lock write keys exclusively and read keys shared; duplicates are allowed."""
        write_keys = list(write_keys)
        read_keys = list(read_keys or ())
        write_indices = {self._index(key) for key in write_keys}
        for index in self._indices(write_keys + read_keys, reverse=False):
            if index in write_indices:
                self._table[index].acquire_write()
            else:
                self._table[index].acquire_read()

    def rw_unlocks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Release locks taken by :meth:`rw_locks` with the same keys."""
        write_keys = list(write_keys)
        read_keys = list(read_keys or ())
        write_indices = {self._index(key) for key in write_keys}
        for index in self._indices(write_keys + read_keys, reverse=True):
            if index in write_indices:
                self._table[index].release_write()
            else:
                self._table[index].release_read()

    @contextmanager
    def hold(self, write_keys: Iterable[str], read_keys: Iterable[str] = ()) -> Iterator[None]:
        """Hold :meth:`rw_locks` for the duration of a ``with`` block."""
        write_keys = list(write_keys)
        read_keys = list(read_keys or ())
        self.rw_locks(write_keys, read_keys)
        try:
            yield
        finally:
            self.rw_unlocks(write_keys, read_keys)