"""A time wheel that runs jobs after a delay, and a shared default wheel."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

from godis import logger

Duration = Union[float, int, timedelta]


def _seconds(duration: Duration) -> float:
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


@dataclass(eq=False)
class _Task:
    delay: float
    key: str
    job: Callable[[], Any]
    circle: int = 0


class TimeWheel:
    """Runs jobs after a delay, checking one slot every ``interval`` seconds.

    Jobs run on their own threads; a job that raises is logged.
    """

    def __init__(self, interval: Duration, slot_num: int) -> None:
        interval = _seconds(interval)
        if interval <= 0 or slot_num <= 0:
            raise ValueError("interval and slot_num must be positive")
        self._interval = interval
        self._slot_num = slot_num
        self._slots: list[list[_Task]] = [[] for _ in range(slot_num)]
        self._timer: dict[str, tuple[int, _Task]] = {}
        self._current_pos = 0
        self._commands: queue.Queue[tuple[str, Any]] = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start ticking in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name="godis-timewheel", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop ticking; pending jobs no longer run."""
        self._commands.put(("stop", None))
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def add_job(self, delay: Duration, key: str, job: Callable[[], Any]) -> None:
        """Run ``job`` after ``delay``; a job with the same non-empty key is replaced."""
        delay = _seconds(delay)
        if delay < 0:
            return
        self._commands.put(("add", _Task(delay=delay, key=key, job=job)))

    def remove_job(self, key: str) -> None:
        """Cancel the pending job with ``key``; nothing happens if there is none."""
        if not key:
            return
        self._commands.put(("remove", key))

    def _run(self) -> None:
        next_tick = time.monotonic() + self._interval
        while True:
            timeout = next_tick - time.monotonic()
            if timeout <= 0:
                self._tick()
                next_tick += self._interval
                continue
            try:
                kind, payload = self._commands.get(timeout=timeout)
            except queue.Empty:
                continue
            if kind == "add":
                self._add_task(payload)
            elif kind == "remove":
                self._remove_task(payload)
            elif kind == "stop":
                return

    def _tick(self) -> None:
        slot = self._slots[self._current_pos]
        self._current_pos = (self._current_pos + 1) % self._slot_num
        self._scan_and_run(slot)

    def _scan_and_run(self, slot: list[_Task]) -> None:
        remaining: list[_Task] = []
        for task in slot:
            if task.circle > 0:
                task.circle -= 1
                remaining.append(task)
                continue
            threading.Thread(target=self._run_job, args=(task.job,), daemon=True).start()
            if task.key:
                self._timer.pop(task.key, None)
        slot[:] = remaining

    @staticmethod
    def _run_job(job: Callable[[], Any]) -> None:
        try:
            job()
        except Exception as exc:  # a failing job must not take the wheel down
            logger.error(exc)

    def _position_and_circle(self, delay: float) -> tuple[int, int]:
        steps = int(delay // self._interval)
        return (self._current_pos + steps) % self._slot_num, steps // self._slot_num

    def _add_task(self, task: _Task) -> None:
        pos, task.circle = self._position_and_circle(task.delay)
        if task.key:
            self._remove_task(task.key)
        self._slots[pos].append(task)
        if task.key:
            self._timer[task.key] = (pos, task)

    def _remove_task(self, key: str) -> None:
        location = self._timer.pop(key, None)
        if location is None:
            return
        pos, task = location
        slot = self._slots[pos]
        for i, candidate in enumerate(slot):
            if candidate is task:
                del slot[i]
                break


_default_wheel: Optional[TimeWheel] = None
_default_lock = threading.Lock()


def _wheel() -> TimeWheel:
    global _default_wheel
    with _default_lock:
        if _default_wheel is None:
            _default_wheel = TimeWheel(1.0, 3600)
            _default_wheel.start()
        return _default_wheel


def delay(duration: Duration, key: str, job: Callable[[], Any]) -> None:
    """Run ``job`` after ``duration`` on the shared wheel."""
    _wheel().add_job(duration, key, job)


def at(when: datetime, key: str, job: Callable[[], Any]) -> None:
    """Run ``job`` at ``when`` on the shared wheel; past times are ignored."""
    _wheel().add_job(when.timestamp() - time.time(), key, job)


def cancel(key: str) -> None:
    """Cancel a pending job on the shared wheel."""
    _wheel().remove_job(key)