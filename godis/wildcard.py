"""Glob-style patterns as used by the KEYS and SCAN commands."""

from __future__ import annotations

import re

_REPLACEMENTS = {
    "+": r"\+",
    ")": r"\)",
    "$": r"\$",
    ".": r"\.",
    "{": r"\{",
    "}": r"\}",
    "|": r"\|",
    "*": ".*",
    "?": ".",
}

END_WITH_ESCAPE = "end with escape \\"


class WildcardError(ValueError):
    """Raised when a wildcard pattern cannot be compiled."""


class Pattern:
    """A compiled wildcard pattern."""

    __slots__ = ("_regex",)

    def __init__(self, regex: re.Pattern[str]) -> None:
        self._regex = regex

    def is_match(self, s: str) -> bool:
        """Return whether the whole string matches the pattern."""
        return self._regex.fullmatch(s) is not None

    def __repr__(self) -> str:
        return f"Pattern({self._regex.pattern!r})"


def compile_pattern(src: str) -> Pattern:
    """Compile a wildcard string into a :class:`Pattern`."""
    parts: list[str] = []
    i = 0
    while i < len(src):
        ch = src[i]
        if ch == "\\":
            if i == len(src) - 1:
                raise WildcardError(END_WITH_ESCAPE)
            parts.append(ch + src[i + 1])
            i += 2
            continue
        if ch == "^":
            negates_class = (
                i > 0 and src[i - 1] == "[" and (i < 2 or src[i - 2] != "\\")
            )
            parts.append("^" if negates_class else r"\^")
        else:
            parts.append(_REPLACEMENTS.get(ch, ch))
        i += 1
    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        raise WildcardError(str(exc)) from exc
    return Pattern(regex)