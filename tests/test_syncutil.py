import threading

import pytest

from godis.syncutil import AtomicBool, WaitGroup


def test_atomic_bool_default_and_set():
    flag = AtomicBool()
    assert bool(flag) is False
    flag.value = True
    assert bool(flag) is True
    assert flag.value is True
    flag.value = False
    assert not flag


def test_atomic_bool_initial_value():
    flag = AtomicBool(True)
    assert flag.value is True
    flag.value = False
    assert flag.value is False


def test_atomic_bool_across_threads():
    flag = AtomicBool()

    def worker():
        flag.value = True

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    assert flag.value is True


def test_wait_group_completes():
    wg = WaitGroup()
    results = []
    wg.add(3)

    def worker(n):
        results.append(n)
        wg.done()

    for n in range(3):
        threading.Thread(target=worker, args=(n,)).start()
    wg.wait()
    assert wg.wait_with_timeout(1) is False
    assert sorted(results) == [0, 1, 2]


def test_wait_with_timeout_times_out():
    wg = WaitGroup()
    wg.add(1)
    assert wg.wait_with_timeout(0.05) is True
    wg.done()
    assert wg.wait_with_timeout(0.05) is False


def test_wait_on_zero_returns_immediately():
    wg = WaitGroup()
    assert wg.wait_with_timeout(0) is False


def test_negative_counter_raises():
    wg = WaitGroup()
    with pytest.raises(ValueError):
        wg.done()
    wg.add(1)
    with pytest.raises(ValueError):
        wg.add(-2)
    assert wg.wait_with_timeout(0.01) is True