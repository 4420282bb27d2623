"""Thread-safe boolean flag and a wait group with timeout."""

from __future__ import annotations

import threading


class AtomicBool:
    """A boolean whose reads and writes are thread safe."""

    def __init__(self, value: bool = False) -> None:
        self._lock = threading.Lock()
        self._value = bool(value)

    @property
    def value(self) -> bool:
        with self._lock:
            return self._value

    @value.setter
    def value(self, v: bool) -> None:
        with self._lock:
            self._value = bool(v)

    def __bool__(self) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"AtomicBool({self.value})"


class WaitGroup:
    """Counts outstanding tasks and lets callers wait for them to finish."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._counter = 0

    def add(self, delta: int) -> None:
        """Change the counter by ``delta``; it may not go below zero."""
        with self._cond:
            if self._counter + delta < 0:
                raise ValueError("negative WaitGroup counter")
            self._counter += delta
            if self._counter == 0:
                self._cond.notify_all()

    def done(self) -> None:
        """Decrement the counter by one."""
        self.add(-1)

    def wait(self) -> None:
        """Block until the counter is zero."""
        with self._cond:
            self._cond.wait_for(lambda: self._counter == 0)

    def wait_with_timeout(self, timeout: float) -> bool:
        """Block until the counter is zero or ``timeout`` seconds pass; True means timed out."""
        with self._cond:
            finished = self._cond.wait_for(lambda: self._counter == 0, timeout)
        return not finished