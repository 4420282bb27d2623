"""A bounded pool of reusable objects such as connections."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable


class PoolError(Exception):
    """Base error of the pool."""


class PoolClosedError(PoolError):
    """Raised when getting from a closed pool."""

    def __init__(self) -> None:
        super().__init__("pool closed")


class PoolExhaustedError(PoolError):
    """Raised to a waiter that can no longer be served."""

    def __init__(self) -> None:
        super().__init__("reach max connection limit")


@dataclass(frozen=True)
class PoolConfig:
    max_idle: int
    max_active: int


class _Waiter:
    __slots__ = ("event", "item", "failed")

    def __init__(self) -> None:
        self.event = threading.Event()
        self.item: Any = None
        self.failed = False


class Pool:
    """Lends out objects made by ``factory`` and destroys surplus ones with ``finalizer``."""

    def __init__(
        self,
        factory: Callable[[], Any],
        finalizer: Callable[[Any], None],
        config: PoolConfig,
    ) -> None:
        self.config = config
        self._factory = factory
        self._finalizer = finalizer
        self._idles: deque[Any] = deque()
        self._waiters: deque[_Waiter] = deque()
        self._active = 0
        self._lock = threading.Lock()
        self._closed = False

    def get(self) -> Any:
        """Borrow an object, creating one or waiting when the pool is at its limit."""
        with self._lock:
            if self._closed:
                raise PoolClosedError()
            if self._idles:
                return self._idles.popleft()
            if self._active >= self.config.max_active:
                waiter = _Waiter()
                self._waiters.append(waiter)
            else:
                waiter = None
                self._active += 1  # hold a place for the new object

        if waiter is not None:
            waiter.event.wait()
            if waiter.failed:
                raise PoolExhaustedError()
            return waiter.item

        try:
            return self._factory()
        except BaseException:
            with self._lock:
                self._active -= 1
            raise

    def put(self, item: Any) -> None:
        """Return a borrowed object."""
        with self._lock:
            if not self._closed:
                if self._waiters:
                    waiter = self._waiters.popleft()
                    waiter.item = item
                    waiter.event.set()
                    return
                if len(self._idles) < self.config.max_idle:
                    self._idles.append(item)
                    return
                self._active -= 1
        self._finalizer(item)

    def close(self) -> None:
        """Close the pool, destroying idle objects; closing twice is harmless."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            idles = list(self._idles)
            self._idles.clear()
            waiters = list(self._waiters)
            self._waiters.clear()
        for waiter in waiters:
            waiter.failed = True
            waiter.event.set()
        for item in idles:
            self._finalizer(item)

    def __enter__(self) -> "Pool":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()