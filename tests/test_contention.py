import threading

import pytest

from vzporedni.contention import greedy_worker, livelock, polite_worker, starvation


def test_zero_runtime_means_no_iterations():
    lock = threading.Lock()
    assert polite_worker(lock, 0) == 0
    assert greedy_worker(lock, 0) == 0


def test_workers_count_and_release_lock():
    lock = threading.Lock()
    assert polite_worker(lock, 0.02) > 0
    assert greedy_worker(lock, 0.02) > 0
    assert lock.locked() is False


def test_starvation_both_workers_progress():
    polite, greedy = starvation(0.05)
    assert polite > 0
    assert greedy > 0


def test_starvation_negative_runtime_rejected():
    with pytest.raises(ValueError):
        starvation(-1)


def test_livelock_without_attempts_nobody_eats():
    assert livelock(0, 0.01) == {0: None, 1: None}


def test_livelock_results_are_within_attempts():
    attempts = 3
    result = livelock(attempts, 0.02)
    assert sorted(result) == [0, 1]
    for tries in result.values():
        assert tries is None or 1 <= tries <= 2 * attempts


def test_livelock_negative_attempts_rejected():
    with pytest.raises(ValueError):
        livelock(-1, 0.01)