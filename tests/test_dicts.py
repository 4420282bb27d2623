import random
import string
from concurrent.futures import ThreadPoolExecutor

import pytest

from godis.dicts import ConcurrentDict, SimpleDict, compute_capacity
from godis.utils import remove_duplicates
from godis.wildcard import WildcardError


def _rand_string(n: int) -> str:
    return "".join(random.choices(string.ascii_letters, k=n))


def _run_concurrently(fn, count=100):
    with ThreadPoolExecutor(max_workers=16) as pool:
        return list(pool.map(fn, range(count)))


@pytest.mark.parametrize("param,expected", [(0, 16), (16, 16), (17, 32), (100, 128), (1024, 1024)])
def test_compute_capacity(param, expected):
    assert compute_capacity(param) == expected


def test_concurrent_put():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        return d.put(key, i), d.get(key)

    results = _run_concurrently(work)
    assert results == [(1, i) for i in range(100)]
    assert len(d) == 100


def test_concurrent_put_with_lock():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        d.rw_locks([key], None)
        try:
            return d.put_with_lock(key, i), d.get_with_lock(key)
        finally:
            d.rw_unlocks([key], None)

    assert _run_concurrently(work) == [(1, i) for i in range(100)]


def test_concurrent_put_if_absent():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        first = d.put_if_absent(key, i)
        v1 = d.get(key)
        second = d.put_if_absent(key, i * 10)
        return first, v1, second, d.get(key)

    assert _run_concurrently(work) == [(1, i, 0, i) for i in range(100)]


def test_concurrent_put_if_absent_with_lock():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        d.rw_locks([key], None)
        try:
            first = d.put_if_absent_with_lock(key, i)
            v1 = d.get_with_lock(key)
            second = d.put_if_absent_with_lock(key, i * 10)
            return first, v1, second, d.get_with_lock(key)
        finally:
            d.rw_unlocks([key], None)

    assert _run_concurrently(work) == [(1, i, 0, i) for i in range(100)]


def test_concurrent_put_if_exists():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        first = d.put_if_exists(key, i)
        d.put(key, i)
        second = d.put_if_exists(key, 10 * i)
        return first, second, d.get(key)

    assert _run_concurrently(work) == [(0, 1, 10 * i) for i in range(100)]


def test_concurrent_put_if_exists_with_lock():
    d = ConcurrentDict(0)

    def work(i):
        key = f"k{i}"
        d.rw_locks([key], None)
        try:
            first = d.put_if_exists_with_lock(key, i)
            d.put_with_lock(key, i)
            d.put_if_exists_with_lock(key, 10 * i)
            return first, d.get_with_lock(key)
        finally:
            d.rw_unlocks([key], None)

    assert _run_concurrently(work) == [(0, 10 * i) for i in range(100)]


def test_concurrent_remove_head():
    d = ConcurrentDict(0)
    total = 100
    for i in range(total):
        d.put(f"k{i}", i)
    assert len(d) == total
    for i in range(total):
        key = f"k{i}"
        assert d.get(key) == i
        assert d.remove(key) == (i, 1)
        assert len(d) == total - i - 1
        assert key not in d
        assert d.remove(key) == (None, 0)
        assert len(d) == total - i - 1


def test_concurrent_remove_tail_and_middle():
    d = ConcurrentDict(0)
    for i in range(100):
        d.put(f"k{i}", i)
    for i in range(9, -1, -1):
        key = f"k{i}"
        assert d.get(key) == i
        assert d.remove(key)[1] == 1
        assert key not in d
        assert d.remove(key)[1] == 0

    d = ConcurrentDict(0)
    d.put("head", 0)
    for i in range(10):
        d.put(f"k{i}", i)
    d.put("tail", 0)
    for i in range(9, -1, -1):
        key = f"k{i}"
        assert d.get(key) == i
        assert d.remove(key)[1] == 1
        assert key not in d
        assert d.remove(key)[1] == 0
    assert sorted(d.keys()) == ["head", "tail"]


def test_concurrent_remove_with_lock():
    d = ConcurrentDict(0)
    total = 100
    for i in range(total):
        d.put_with_lock(f"k{i}", i)
    assert len(d) == total
    for i in range(total):
        key = f"k{i}"
        assert d.get_with_lock(key) == i
        assert d.remove_with_lock(key) == (i, 1)
        assert len(d) == total - i - 1
        assert d.get_with_lock(key) is None
        assert d.remove_with_lock(key) == (None, 0)
        assert len(d) == total - i - 1


def test_concurrent_items():
    d = ConcurrentDict(0)
    for i in range(100):
        d.put(f"k{i}", i)
    seen = list(d.items())
    assert len(seen) == 100
    assert all(key == f"k{value}" for key, value in seen)


def test_concurrent_random_keys():
    d = ConcurrentDict(0)
    for i in range(100):
        d.put(f"k{i}", i)
    result = d.random_keys(10)
    assert len(result) == 10
    assert all(k in d for k in result)
    distinct = d.random_distinct_keys(10)
    assert len(distinct) == 10
    assert len(set(distinct)) == 10


def test_concurrent_random_keys_limit_exceeds_size():
    d = ConcurrentDict(0)
    d.put("a", 1)
    d.put("b", 2)
    assert sorted(d.random_keys(5)) == ["a", "b"]
    assert sorted(d.random_distinct_keys(5)) == ["a", "b"]


def test_concurrent_keys():
    d = ConcurrentDict(0)
    keys = {f"{_rand_string(5)}{i}" for i in range(10)}
    for k in keys:
        d.put(k, _rand_string(5))
    assert sorted(d.keys()) == sorted(keys)


def test_concurrent_clear():
    d = ConcurrentDict(0)
    for i in range(10):
        d.put(f"k{i}", i)
    d.clear()
    assert len(d) == 0
    assert d.keys() == []


def _scan_all(d, pattern, count):
    cursor = 0
    result = []
    while True:
        keys, cursor = d.scan(cursor, count, pattern)
        result.extend(keys)
        if cursor == 0:
            return result


def test_dict_scan():
    d = ConcurrentDict(0)
    for i in range(100):
        d.put(f"kkk{i}", i)
    for i in range(100):
        d.put(f"key{i}", i)
    result = remove_duplicates(_scan_all(d, "*", 20))
    assert len(result) == 200
    matched = remove_duplicates(_scan_all(d, "key*", 20))
    assert len(matched) == 100
    assert all(k.startswith(b"key") for k in matched)
    keys, _ = d.scan(0, 20, "no*")
    assert keys == []


def test_dict_scan_bad_pattern():
    d = ConcurrentDict(0)
    d.put("a", 1)
    d.put("b", 2)
    with pytest.raises(WildcardError):
        d.scan(0, 1, "\\")


def test_simple_keys():
    d = SimpleDict()
    expected = []
    for i in range(10):
        s = f"{_rand_string(5)}{i}"
        d.put(s, s)
        expected.append(s)
    assert sorted(d.keys()) == sorted(expected)
    assert len(d) == 10


def test_simple_put_if_exists():
    d = SimpleDict()
    key = _rand_string(5)
    assert d.put_if_exists(key, key + "1") == 0
    d.put(key, key + "1")
    assert d.put_if_exists(key, key + "2") == 1
    assert d.get(key) == key + "2"


def test_simple_put_and_remove():
    d = SimpleDict()
    assert d.put("a", 1) == 1
    assert d.put("a", 2) == 0
    assert d.put_if_absent("a", 3) == 0
    assert d.put_if_absent("b", 4) == 1
    assert d.remove("a") == (2, 1)
    assert d.remove("a") == (None, 0)
    assert "b" in d and "a" not in d
    d.clear()
    assert len(d) == 0


def test_simple_random_keys():
    d = SimpleDict()
    for i in range(5):
        d.put(f"k{i}", i)
    keys = d.random_keys(8)
    assert len(keys) == 8
    assert all(k in d for k in keys)
    distinct = d.random_distinct_keys(3)
    assert len(set(distinct)) == 3
    assert sorted(d.random_distinct_keys(10)) == sorted(d.keys())


def test_simple_scan():
    d = SimpleDict()
    size = 10
    for i in range(size):
        s = f"a{_rand_string(5)}{i}"
        d.put(s, s.encode())
    keys, cursor = d.scan(0, size, "*")
    assert len(keys) == size * 2
    assert cursor == 0
    for i in range(size):
        s = f"b{_rand_string(5)}{i}"
        d.put(s, s)
    keys, _ = d.scan(0, size * 2, "a*")
    assert len(keys) == size * 2
    assert keys[0] == keys[1]


def test_simple_scan_non_bytes_value():
    d = SimpleDict()
    d.put("a", "text")
    with pytest.raises(TypeError):
        d.scan(0, 10, "*")