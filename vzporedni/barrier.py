"""Barriers that hold a group of threads until every one of them has arrived."""

from __future__ import annotations

import argparse
import random
import threading
import time
from collections.abc import Callable, Sequence
from typing import Protocol


class _Barrier(Protocol):
    def wait(self) -> object: ...


def _check_parties(parties: int) -> None:
    if parties < 1:
        raise ValueError(f"a barrier needs at least one party, got {parties}")


class CyclicBarrier:
    """A reusable barrier built on a lock and a condition variable."""

    def __init__(self, parties: int) -> None:
        _check_parties(parties)
        self.parties = parties
        self._cond = threading.Condition()
        self._count = 0
        self._generation = 0

    def wait(self) -> int:
        """Block until all parties have arrived; returns the round that was completed."""
        with self._cond:
            generation = self._generation
            self._count += 1
            if self._count < self.parties:
                while generation == self._generation:
                    self._cond.wait()
            else:
                self._count = 0
                self._generation += 1
                self._cond.notify_all()
            return generation


class TwoGateBarrier:
    """A reusable barrier with two gates, each opened by the last thread to reach it."""

    def __init__(self, parties: int) -> None:
        _check_parties(parties)
        self.parties = parties
        self._lock = threading.Lock()
        self._count = 0
        self._arrived = threading.Semaphore(0)
        self._left = threading.Semaphore(0)

    def wait(self) -> None:
        """Block until all parties have passed both gates."""
        with self._lock:
            self._count += 1
            if self._count == self.parties:
                self._arrived.release(self.parties)
        self._arrived.acquire()

        with self._lock:
            self._count -= 1
            if self._count == 0:
                self._left.release(self.parties)
        self._left.acquire()


class SpinBarrier:
    """A reusable two-phase barrier whose waiters spin, reading the phase under a lock.

    Phase 0 lets threads through the first gate, phase 1 through the second.
    """

    def __init__(self, parties: int) -> None:
        _check_parties(parties)
        self.parties = parties
        self._lock = threading.Lock()
        self._count = 0
        self._phase = 0

    def _spin_while(self, phase: int) -> None:
        while True:
            with self._lock:
                if self._phase != phase:
                    return
            time.sleep(0)

    def wait(self) -> None:
        """Block until all parties have passed both gates."""
        # gate 0: wait until the previous round has left gate 1
        with self._lock:
            must_wait = self._phase == 1 and self._count > 0
            if not must_wait:
                if self._phase == 1:
                    self._phase = 0
                self._count += 1
        if must_wait:
            self._spin_while(1)
            with self._lock:
                self._count += 1

        # gate 1: wait until everyone has passed gate 0
        with self._lock:
            last = self._count >= self.parties
            if last:
                self._phase = 1
                self._count -= 1
        if not last:
            self._spin_while(0)
            with self._lock:
                self._count -= 1


def run(
    workers: int = 4,
    printouts: int = 5,
    barrier_factory: Callable[[int], _Barrier] | None = CyclicBarrier,
    jitter: float = 0.01,
) -> list[tuple[int, int]]:
    """Let each worker print ``printouts`` times, meeting at the barrier after each print.

    Returns the ``(worker, printout)`` pairs in the order they were printed.
    With no barrier factory the workers run without any coordination.
    """
    if workers < 1:
        raise ValueError(f"need at least one worker, got {workers}")
    if printouts < 0:
        raise ValueError(f"printouts must not be negative: {printouts}")
    if jitter < 0:
        raise ValueError(f"jitter must not be negative: {jitter}")
    barrier = barrier_factory(workers) if barrier_factory is not None else None
    events: list[tuple[int, int]] = []
    lock = threading.Lock()

    def work(worker_id: int) -> None:
        rng = random.Random()
        for i in range(printouts):
            time.sleep(rng.uniform(0, jitter))
            with lock:
                print("Worker", worker_id, "printout", i, flush=True)
                events.append((worker_id, i))
            if barrier is not None:
                barrier.wait()

    threads = [threading.Thread(target=work, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return events


_BARRIERS: dict[str, Callable[[int], _Barrier] | None] = {
    "none": None,
    "cond": CyclicBarrier,
    "gates": TwoGateBarrier,
    "spin": SpinBarrier,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Barrier demos.")
    parser.add_argument("-g", "--workers", type=int, default=4, help="# of workers")
    parser.add_argument("-p", "--printouts", type=int, default=5, help="# of printouts")
    parser.add_argument("-b", "--barrier", choices=list(_BARRIERS), default="cond")
    parser.add_argument("--jitter", type=float, default=0.01)
    args = parser.parse_args(argv)
    run(args.workers, args.printouts, _BARRIERS[args.barrier], args.jitter)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())