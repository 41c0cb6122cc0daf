import threading

import pytest

from vzporedni.barrier import CyclicBarrier, SpinBarrier, TwoGateBarrier, main, run

BARRIERS = [CyclicBarrier, TwoGateBarrier, SpinBarrier]


@pytest.mark.parametrize("factory", BARRIERS)
def test_no_worker_runs_ahead(factory):
    events = run(workers=3, printouts=4, barrier_factory=factory, jitter=0.002)
    rounds = [printout for _, printout in events]
    assert rounds == sorted(rounds)
    assert len(events) == 12


@pytest.mark.parametrize("factory", BARRIERS)
def test_every_round_holds_every_worker(factory):
    workers, printouts = 4, 3
    events = run(workers, printouts, factory, jitter=0.002)
    for i in range(printouts):
        block = events[i * workers:(i + 1) * workers]
        assert {printout for _, printout in block} == {i}
        assert {worker for worker, _ in block} == set(range(workers))


def test_without_barrier_all_printouts_happen():
    events = run(workers=3, printouts=5, barrier_factory=None, jitter=0.0)
    assert sorted(events) == sorted((w, i) for w in range(3) for i in range(5))


def test_single_party_never_blocks():
    barriers = [CyclicBarrier(1), TwoGateBarrier(1), SpinBarrier(1)]
    for barrier in barriers:
        for _ in range(5):
            barrier.wait()
    assert [barrier.parties for barrier in barriers] == [1, 1, 1]


def test_cyclic_barrier_reports_rounds():
    barrier = CyclicBarrier(1)
    assert [barrier.wait() for _ in range(3)] == [0, 1, 2]


def test_cyclic_barrier_blocks_until_all_arrive():
    barrier = CyclicBarrier(2)
    thread = threading.Thread(target=barrier.wait, daemon=True)
    thread.start()
    thread.join(timeout=0.1)
    assert thread.is_alive()
    barrier.wait()
    thread.join(timeout=2)
    assert not thread.is_alive()


def test_zero_parties_rejected():
    with pytest.raises(ValueError):
        CyclicBarrier(0)
    with pytest.raises(ValueError):
        TwoGateBarrier(0)
    with pytest.raises(ValueError):
        SpinBarrier(0)


def test_run_rejects_bad_arguments():
    with pytest.raises(ValueError):
        run(workers=0)
    with pytest.raises(ValueError):
        run(printouts=-1)


def test_main_runs(capsys):
    assert main(["-g", "2", "-p", "2", "-b", "gates", "--jitter", "0"]) == 0
    assert capsys.readouterr().out.count("printout") == 4