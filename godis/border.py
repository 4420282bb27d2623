"""Range borders for score and lexicographic queries on sorted sets."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

SCORE_NEGATIVE_INF = -1
SCORE_POSITIVE_INF = 1
LEX_NEGATIVE_INF = ord("-")
LEX_POSITIVE_INF = ord("+")

_NOT_FLOAT = "ERR min or max is not a float"
_NOT_LEX = "ERR min or max not valid string range item"


@dataclass
class Element:
    """A member with its score."""

    member: str
    score: float


class Border(ABC):
    """One end of a range; ``max.greater(e)`` and ``min.less(e)`` mean ``e`` is inside."""

    inf: int
    value: object
    exclude: bool

    @abstractmethod
    def greater(self, element: Element) -> bool:
        """Return whether ``element`` lies below this upper border."""

    @abstractmethod
    def less(self, element: Element) -> bool:
        """Return whether ``element`` lies above this lower border."""

    @abstractmethod
    def is_intersected(self, max_border: "Border") -> bool:
        """Return whether this lower border and ``max_border`` leave an empty range."""


@dataclass(frozen=True)
class ScoreBorder(Border):
    """A border on scores: a value, open or closed, or an infinity."""

    inf: int = 0
    value: float = 0.0
    exclude: bool = False

    def greater(self, element: Element) -> bool:
        if self.inf == SCORE_NEGATIVE_INF:
            return False
        if self.inf == SCORE_POSITIVE_INF:
            return True
        if self.exclude:
            return self.value > element.score
        return self.value >= element.score

    def less(self, element: Element) -> bool:
        if self.inf == SCORE_NEGATIVE_INF:
            return True
        if self.inf == SCORE_POSITIVE_INF:
            return False
        if self.exclude:
            return self.value < element.score
        return self.value <= element.score

    def is_intersected(self, max_border: Border) -> bool:
        max_value = max_border.value
        return self.value > max_value or (
            self.value == max_value and (self.exclude or max_border.exclude)
        )


@dataclass(frozen=True)
class LexBorder(Border):
    """A border on members: a string, open or closed, or ``-``/``+``."""

    inf: int = 0
    value: str = ""
    exclude: bool = False

    def greater(self, element: Element) -> bool:
        if self.inf == LEX_NEGATIVE_INF:
            return False
        if self.inf == LEX_POSITIVE_INF:
            return True
        if self.exclude:
            return self.value > element.member
        return self.value >= element.member

    def less(self, element: Element) -> bool:
        if self.inf == LEX_NEGATIVE_INF:
            return True
        if self.inf == LEX_POSITIVE_INF:
            return False
        if self.exclude:
            return self.value < element.member
        return self.value <= element.member

    def is_intersected(self, max_border: Border) -> bool:
        max_value = max_border.value
        return (
            self.inf == LEX_POSITIVE_INF
            or self.value > max_value
            or (self.value == max_value and (self.exclude or max_border.exclude))
        )


SCORE_POSITIVE_INF_BORDER = ScoreBorder(inf=SCORE_POSITIVE_INF)
SCORE_NEGATIVE_INF_BORDER = ScoreBorder(inf=SCORE_NEGATIVE_INF)
LEX_POSITIVE_INF_BORDER = LexBorder(inf=LEX_POSITIVE_INF)
LEX_NEGATIVE_INF_BORDER = LexBorder(inf=LEX_NEGATIVE_INF)


def _parse_float(s: str) -> float:
    if not s or s != s.strip() or "_" in s:
        raise ValueError(_NOT_FLOAT)
    try:
        return float(s)
    except ValueError:
        pass
    try:
        return float.fromhex(s)
    except ValueError:
        raise ValueError(_NOT_FLOAT) from None


def parse_score_border(s: str) -> ScoreBorder:
    """Parse a score border such as ``2.5``, ``(2.5``, ``-inf`` or ``+inf``."""
    if s in ("inf", "+inf"):
        return SCORE_POSITIVE_INF_BORDER
    if s == "-inf":
        return SCORE_NEGATIVE_INF_BORDER
    if s.startswith("("):
        return ScoreBorder(value=_parse_float(s[1:]), exclude=True)
    return ScoreBorder(value=_parse_float(s), exclude=False)


def parse_lex_border(s: str) -> LexBorder:
    """Parse a lexicographic border such as ``[a``, ``(a``, ``-`` or ``+``."""
    if s == "+":
        return LEX_POSITIVE_INF_BORDER
    if s == "-":
        return LEX_NEGATIVE_INF_BORDER
    if s.startswith("("):
        return LexBorder(value=s[1:], exclude=True)
    if s.startswith("["):
        return LexBorder(value=s[1:], exclude=False)
    raise ValueError(_NOT_LEX)