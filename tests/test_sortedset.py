import pytest

from godis.border import (
    SCORE_NEGATIVE_INF_BORDER,
    SCORE_POSITIVE_INF_BORDER,
    parse_lex_border,
    parse_score_border,
)
from godis.sortedset import SortedSet
from godis.wildcard import WildcardError


def _make(n=10):
    s = SortedSet()
    for i in range(n):
        s.add(f"m{i}", float(i))
    return s


def test_pop_min():
    s = SortedSet()
    s.add("s1", 1)
    s.add("s2", 2)
    s.add("s3", 3)
    s.add("s4", 4)
    results = s.pop_min(2)
    assert [e.member for e in results] == ["s1", "s2"]
    assert len(s) == 2
    assert s.get("s1") is None


def test_pop_min_empty():
    assert SortedSet().pop_min(3) == []


def test_scan():
    s = SortedSet()
    size = 10
    for i in range(size):
        s.add(f"a{i:05d}", float(i))
    keys, cursor = s.scan(0, size, "*")
    assert len(keys) == size * 2
    assert cursor == 0
    for i in range(size):
        s.add(f"b{i:05d}", float(i + size))
    keys, _ = s.scan(0, size * 2, "a*")
    assert len(keys) == size * 2


def test_scan_formats_score():
    s = SortedSet()
    s.add("x", 1.5)
    assert s.scan(0, 10, "*") == ([b"x", b"1.5000000000"], 0)


def test_scan_bad_pattern():
    with pytest.raises(WildcardError):
        _make(2).scan(0, 10, "\\")


def test_add_updates_score():
    s = SortedSet()
    assert s.add("a", 1) is True
    assert s.add("b", 2) is True
    assert s.add("a", 3) is False
    assert s.get("a").score == 3
    assert [e.member for e in s.range_by_rank(0, 2, False)] == ["b", "a"]


def test_get_rank():
    s = _make(5)
    assert s.get_rank("m0", False) == 0
    assert s.get_rank("m4", False) == 4
    assert s.get_rank("m0", True) == 4
    assert s.get_rank("m4", True) == 0
    assert s.get_rank("nope", False) == -1


def test_remove():
    s = _make(5)
    assert s.remove("m2") is True
    assert s.remove("m2") is False
    assert len(s) == 4
    assert s.get_rank("m3", False) == 2


def test_range_by_rank():
    s = _make(10)
    assert [e.member for e in s.range_by_rank(2, 5, False)] == ["m2", "m3", "m4"]
    assert [e.member for e in s.range_by_rank(0, 3, True)] == ["m9", "m8", "m7"]
    assert [e.member for e in s.range_by_rank(2, 4, True)] == ["m7", "m6"]


def test_range_by_rank_bounds():
    s = _make(3)
    with pytest.raises(IndexError):
        s.range_by_rank(3, 3, False)
    with pytest.raises(IndexError):
        s.range_by_rank(1, 4, False)


def test_range_count():
    s = _make(10)
    assert s.range_count(parse_score_border("2"), parse_score_border("(5")) == 3
    assert s.range_count(SCORE_NEGATIVE_INF_BORDER, SCORE_POSITIVE_INF_BORDER) == 10
    assert SortedSet().range_count(SCORE_NEGATIVE_INF_BORDER, SCORE_POSITIVE_INF_BORDER) == 0


def test_range_with_offset_and_limit():
    s = _make(10)
    lo, hi = parse_score_border("2"), parse_score_border("7")
    assert [e.member for e in s.range(lo, hi, 0, -1, False)] == [
        "m2", "m3", "m4", "m5", "m6", "m7"
    ]
    assert [e.member for e in s.range(lo, hi, 1, 2, False)] == ["m3", "m4"]
    assert [e.member for e in s.range(lo, hi, 0, 3, True)] == ["m7", "m6", "m5"]
    assert s.range(lo, hi, 0, 0, False) == []
    assert s.range(lo, hi, -1, 5, False) == []


def test_range_by_lex():
    s = SortedSet()
    for m in "abcde":
        s.add(m, 0)
    got = s.range(parse_lex_border("[b"), parse_lex_border("(e"), 0, -1, False)
    assert [e.member for e in got] == ["b", "c", "d"]


def test_remove_range():
    s = _make(10)
    assert s.remove_range(parse_score_border("(3"), parse_score_border("6")) == 3
    assert len(s) == 7
    assert s.get("m5") is None
    assert s.get("m3") is not None and s.get("m3").score == 3


def test_remove_by_rank():
    s = _make(10)
    assert s.remove_by_rank(0, 3) == 3
    assert len(s) == 7
    assert [e.member for e in s.range_by_rank(0, 2, False)] == ["m3", "m4"]
    assert s.get("m0") is None