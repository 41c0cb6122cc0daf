import math
import random

import pytest

from vzporedni.montecarlo import Experiment, Method, estimate_pi, main, sample


class _Constant:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_sample_all_inside():
    result = sample(50, _Constant(0.5))
    assert result.shots == 50
    assert result.hits == 50


def test_sample_all_outside():
    result = sample(30, _Constant(0.9))
    assert result.shots == 30
    assert result.hits == 0


def test_sample_negative_iterations():
    with pytest.raises(ValueError):
        sample(-1, random.Random(0))


def test_sample_is_reproducible_with_same_seed():
    first = sample(1000, random.Random(7))
    second = sample(1000, random.Random(7))
    assert first.shots == 1000
    assert second.shots == 1000
    assert first.hits == second.hits
    assert 700 < first.hits < 870


def test_experiment_add():
    total = Experiment(10, 7) + Experiment(5, 2)
    assert total == Experiment(15, 9)


def test_experiment_add_other_type():
    with pytest.raises(TypeError):
        Experiment(1, 1) + 3


def test_experiment_value():
    assert Experiment(shots=4, hits=3).value == 3.0


def test_experiment_value_without_shots_is_nan():
    empty = Experiment()
    assert (empty.shots, empty.hits) == (0, 0)
    assert math.isnan(empty.value)


@pytest.mark.parametrize("method", [m for m in Method if m is not Method.RACE])
def test_estimate_counts_every_shot(method):
    workers = 1 if method is Method.SEQUENTIAL else 3
    result = estimate_pi(4001, workers, method, seed=5)
    assert result.shots == workers * (4001 // workers)
    assert 0 <= result.hits <= result.shots
    assert abs(result.value - math.pi) < 0.4


def test_race_never_overcounts():
    result = estimate_pi(2000, 2, Method.RACE)
    assert 0 < result.shots <= 2000
    assert 0 <= result.hits <= result.shots


def test_sequential_uses_share_of_one_worker():
    result = estimate_pi(1000, 4, Method.SEQUENTIAL)
    assert result.shots == 1000 // 4


def test_seeded_is_reproducible():
    first = estimate_pi(3000, 3, Method.SEEDED, seed=11)
    second = estimate_pi(3000, 3, Method.SEEDED, seed=11)
    assert first == second


def test_seeded_single_worker_matches_sample():
    assert estimate_pi(500, 1, Method.SEEDED, seed=42) == sample(500, random.Random(42))


def test_locked_rng_single_worker_matches_sample():
    assert estimate_pi(500, 1, Method.LOCKED_RNG, seed=3) == sample(500, random.Random(3))


def test_zero_workers_rejected():
    with pytest.raises(ValueError):
        estimate_pi(100, 0)


def test_negative_iterations_rejected():
    with pytest.raises(ValueError):
        estimate_pi(-5, 2)


def test_main_prints_result(capsys):
    assert main(["-i", "2000", "-g", "2", "-m", "seeded"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("pi: {2000 ")
    assert "workers: 2" in out