"""Asynchronous leveled logging to stdout and, optionally, a daily log file."""

from __future__ import annotations

import os
import queue
import sys
import threading
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, TextIO

BUFFER_SIZE = 100_000
_TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S "
_STOP = object()


class LogLevel(IntEnum):
    """Severity of a log entry."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    @property
    def flag(self) -> str:
        """The tag written in front of each message."""
        return _LEVEL_FLAGS[self]


_LEVEL_FLAGS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERROR",
    LogLevel.FATAL: "FATAL",
}


@dataclass(frozen=True)
class Settings:
    """Where log files go: ``<path>/<name>-<date>.<ext>``, the date in strftime format."""

    path: str
    name: str
    ext: str
    time_format: str = "%Y-%m-%d"

    def file_name(self) -> str:
        return f"{self.name}-{time.strftime(self.time_format)}.{self.ext}"


def open_log_file(file_name: str, directory: str) -> TextIO:
    """Open ``file_name`` in ``directory`` for appending, creating the directory if needed."""
    try:
        os.stat(directory)
    except PermissionError:
        raise PermissionError(f"permission denied dir: {directory}") from None
    except FileNotFoundError:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            raise OSError(f"error during make dir {directory}, err: {exc}") from exc
    try:
        return open(os.path.join(directory, file_name), "a", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"fail to open file, err: {exc}") from exc


class Logger:
    """Writes entries from a background thread to stdout and, with settings, to a file.

    The file is reopened whenever the dated file name changes.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._file: Optional[TextIO] = None
        self._file_path: Optional[str] = None
        if settings is not None:
            self._open(settings.file_name())
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=BUFFER_SIZE)
        self._closed = False
        self._state_lock = threading.Lock()
        self._thread = threading.Thread(target=self._run, name="godis-logger", daemon=True)
        self._thread.start()

    def _open(self, file_name: str) -> None:
        assert self._settings is not None
        new_file = open_log_file(file_name, self._settings.path)
        if self._file is not None:
            self._file.close()
        self._file = new_file
        self._file_path = os.path.join(self._settings.path, file_name)

    def _run(self) -> None:
        while True:
            entry = self._queue.get()
            try:
                if entry is _STOP:
                    return
                self._write(entry)
            finally:
                self._queue.task_done()

    def _write(self, msg: str) -> None:
        if self._settings is not None:
            file_name = self._settings.file_name()
            if os.path.join(self._settings.path, file_name) != self._file_path:
                self._open(file_name)
        line = time.strftime(_TIMESTAMP_FORMAT) + msg
        if not line.endswith("\n"):
            line += "\n"
        out = sys.stdout
        if out is not None:
            out.write(line)
            out.flush()
        if self._file is not None:
            self._file.write(line)
            self._file.flush()

    def _emit(self, level: LogLevel, msg: str, depth: int) -> None:
        level = LogLevel(level)
        try:
            frame = sys._getframe(depth)
        except ValueError:
            formatted = f"[{level.flag}] {msg}"
        else:
            file_name = os.path.basename(frame.f_code.co_filename)
            formatted = f"[{level.flag}][{file_name}:{frame.f_lineno}] {msg}"
        with self._state_lock:
            if self._closed:
                raise RuntimeError("logger is closed")
            self._queue.put(formatted)

    def output(self, level: LogLevel, msg: str) -> None:
        """Queue ``msg`` at ``level``, tagged with the caller's file and line."""
        self._emit(level, msg, 2)

    def flush(self) -> None:
        """Block until every queued entry has been written."""
        self._queue.join()

    def close(self) -> None:
        """Write what is queued, stop the writer thread and close the file."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        if threading.current_thread() is not self._thread:
            self._thread.join()
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


_default_logger: Optional[Logger] = None
_default_lock = threading.Lock()


def _default() -> Logger:
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            _default_logger = Logger()
        return _default_logger


def setup(settings: Settings) -> Logger:
    """Replace the default logger with one writing to a file as well; return it."""
    global _default_logger
    new_logger = Logger(settings)
    with _default_lock:
        old, _default_logger = _default_logger, new_logger
    if old is not None:
        old.close()
    return new_logger


def _join(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args) + "\n"


def _format(fmt: str, args: tuple[Any, ...]) -> str:
    return fmt % args if args else fmt


def debug(*args: Any) -> None:
    """Log the arguments, space separated, at DEBUG level."""
    _default()._emit(LogLevel.DEBUG, _join(args), 2)


def debugf(fmt: str, *args: Any) -> None:
    """Log a %-formatted message at DEBUG level."""
    _default()._emit(LogLevel.DEBUG, _format(fmt, args), 2)


def info(*args: Any) -> None:
    """Log the arguments, space separated, at INFO level."""
    _default()._emit(LogLevel.INFO, _join(args), 2)


def infof(fmt: str, *args: Any) -> None:
    """Log a %-formatted message at INFO level."""
    _default()._emit(LogLevel.INFO, _format(fmt, args), 2)


def warn(*args: Any) -> None:
    """Log the arguments, space separated, at WARNING level."""
    _default()._emit(LogLevel.WARNING, _join(args), 2)


def error(*args: Any) -> None:
    """Log the arguments, space separated, at ERROR level."""
    _default()._emit(LogLevel.ERROR, _join(args), 2)


def errorf(fmt: str, *args: Any) -> None:
    """Log a %-formatted message at ERROR level."""
    _default()._emit(LogLevel.ERROR, _format(fmt, args), 2)


def fatal(*args: Any) -> None:
    """Log the arguments, space separated, at FATAL level; the program keeps running."""
    _default()._emit(LogLevel.FATAL, _join(args), 2)