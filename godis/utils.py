"""Small helpers for command lines, byte comparison and index ranges."""

from __future__ import annotations

from typing import Any, Iterable


def to_cmd_line(*args: str) -> list[bytes]:
    """Encode each string argument as bytes."""
    return [arg.encode() for arg in args]


def to_cmd_line2(command_name: str, *args: str) -> list[bytes]:
    """Build a command line from a command name and string arguments."""
    return [command_name.encode(), *(arg.encode() for arg in args)]


def to_cmd_line3(command_name: str, *args: bytes) -> list[bytes]:
    """Build a command line from a command name and byte arguments."""
    return [command_name.encode(), *args]


def bytes_equals(a: bytes | None, b: bytes | None) -> bool:
    """Compare two optional byte strings; ``None`` only equals ``None``."""
    if (a is None) != (b is None):
        return False
    return a == b


def equals(a: Any, b: Any) -> bool:
    """Compare two values, treating byte-like values by content."""
    byte_types = (bytes, bytearray, memoryview)
    if isinstance(a, byte_types) and isinstance(b, byte_types):
        return bytes_equals(bytes(a), bytes(b))
    return a == b


def convert_range(start: int, end: int, size: int) -> tuple[int, int]:
    """Convert an inclusive, possibly negative index pair to a half-open range.

    Returns ``(-1, -1)`` when the range falls outside the sequence.
    """
    if start < -size:
        return -1, -1
    if start < 0:
        start = size + start
    elif start >= size:
        return -1, -1

    if end < -size:
        return -1, -1
    if end < 0:
        end = size + end + 1
    elif end < size:
        end = end + 1
    else:
        end = size

    if start > end:
        return -1, -1
    return start, end


def remove_duplicates(items: Iterable[bytes]) -> list[bytes]:
    """Drop repeated byte strings, keeping the first occurrence of each."""
    seen: set[bytes] = set()
    result: list[bytes] = []
    for item in items:
        key = bytes(item)
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result