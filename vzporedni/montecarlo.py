"""Monte Carlo estimation of pi, with several ways of sharing the work between threads."""

from __future__ import annotations

import argparse
import enum
import math
import queue
import random
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass
class Experiment:
    """Shots fired at the unit square and hits inside the quarter circle."""

    shots: int = 0
    hits: int = 0

    @property
    def value(self) -> float:
        """The estimate of pi, NaN when nothing was shot."""
        if self.shots == 0:
            return math.nan
        return 4.0 * self.hits / self.shots

    def __add__(self, other: object) -> Experiment:
        if not isinstance(other, Experiment):
            return NotImplemented
        return Experiment(self.shots + other.shots, self.hits + other.hits)

    def __str__(self) -> str:
        return f"{{{self.shots} {self.hits} {self.value}}}"


class Method(enum.Enum):
    """How the workers share the random generator and the result."""

    SEQUENTIAL = "sequential"  # one worker, no threads
    RACE = "race"  # everyone updates one shared result without protection
    SPIN = "spin"  # a busy flag guards the shared result (still racy)
    TURNS = "turns"  # workers take strict turns at updating the shared result
    MUTEX = "mutex"  # a lock guards every update of the shared result
    ATOMIC = "atomic"  # the shared counters are updated atomically
    LOCAL_MUTEX = "local-mutex"  # count locally, add to the shared result under a lock
    SLOTS = "slots"  # each worker updates its own slot in a list
    LOCAL_SLOTS = "local-slots"  # count locally, then store into the worker's slot
    CHANNEL = "channel"  # count locally, send the result through a queue
    SHARED_RNG = "shared-rng"  # all workers draw from the module's generator
    LOCKED_RNG = "locked-rng"  # one seeded generator, each draw under a lock
    SEEDED = "seeded"  # a private generator per worker seeded with seed + 100 * id


class _AtomicCounter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def add(self, amount: int) -> None:
        with self._lock:
            self._value += amount

    def load(self) -> int:
        with self._lock:
            return self._value


def sample(iterations: int, rng: random.Random) -> Experiment:
    """Shoot ``iterations`` random points with ``rng`` and count those inside the circle."""
    if iterations < 0:
        raise ValueError(f"iterations must not be negative: {iterations}")
    result = Experiment()
    for _ in range(iterations):
        x = rng.random()
        y = rng.random()
        result.shots += 1
        if x * x + y * y < 1:
            result.hits += 1
    return result


def _run_threads(workers: int, target) -> None:
    threads = [threading.Thread(target=target, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def _shared(method: Method, workers: int, per_worker: int) -> Experiment:
    shared = Experiment()
    mutex = threading.Lock()
    state = {"flag": 0}

    def work(worker_id: int) -> None:
        rng = random.Random()
        for _ in range(per_worker):
            x = rng.random()
            y = rng.random()
            inside = x * x + y * y < 1
            if method is Method.MUTEX:
                with mutex:
                    shared.shots += 1
                    if inside:
                        shared.hits += 1
                continue
            if method is Method.SPIN:
                while state["flag"] != 0:
                    time.sleep(0)
                state["flag"] = 1
            elif method is Method.TURNS:
                while state["flag"] != worker_id:
                    time.sleep(0)
            shared.shots += 1
            if inside:
                shared.hits += 1
            if method is Method.SPIN:
                state["flag"] = 0
            elif method is Method.TURNS:
                state["flag"] = (state["flag"] + 1) % workers

    _run_threads(workers, work)
    return shared


def _atomic(workers: int, per_worker: int) -> Experiment:
    shots, hits = _AtomicCounter(), _AtomicCounter()

    def work(_: int) -> None:
        rng = random.Random()
        for _ in range(per_worker):
            x = rng.random()
            y = rng.random()
            shots.add(1)
            if x * x + y * y < 1:
                hits.add(1)

    _run_threads(workers, work)
    return Experiment(shots.load(), hits.load())


def _local_mutex(workers: int, per_worker: int) -> Experiment:
    total = Experiment()
    lock = threading.Lock()

    def work(_: int) -> None:
        nonlocal total
        mine = sample(per_worker, random.Random())
        with lock:
            total = total + mine

    _run_threads(workers, work)
    return total


def _slots(method: Method, workers: int, per_worker: int) -> Experiment:
    slots = [Experiment() for _ in range(workers)]

    def work(worker_id: int) -> None:
        rng = random.Random()
        if method is Method.LOCAL_SLOTS:
            slots[worker_id] = sample(per_worker, rng)
            return
        slot = slots[worker_id]
        for _ in range(per_worker):
            x = rng.random()
            y = rng.random()
            slot.shots += 1
            if x * x + y * y < 1:
                slot.hits += 1

    _run_threads(workers, work)
    return sum(slots, Experiment())


class _LockedRandom:
    def __init__(self, rng: random.Random, lock: threading.Lock) -> None:
        self._rng = rng
        self._lock = lock

    def random(self) -> float:
        with self._lock:
            return self._rng.random()


def _channel(method: Method, workers: int, per_worker: int, seed: int) -> Experiment:
    results: queue.Queue[Experiment] = queue.Queue()
    locked = _LockedRandom(random.Random(seed), threading.Lock())

    def work(worker_id: int) -> None:
        if method is Method.SHARED_RNG:
            rng = random
        elif method is Method.LOCKED_RNG:
            rng = locked
        elif method is Method.SEEDED:
            rng = random.Random(seed + 100 * worker_id)
        else:
            rng = random.Random()
        results.put(sample(per_worker, rng))

    threads = [
        threading.Thread(target=work, args=(i,), daemon=True) for i in range(workers)
    ]
    for thread in threads:
        thread.start()
    total = Experiment()
    for _ in range(workers):
        total = total + results.get()
    return total


def estimate_pi(iterations: int = 10_000_000, workers: int = 2,
                method: Method = Method.CHANNEL, seed: int = 0) -> Experiment:
    """Estimate pi; each worker shoots ``iterations // workers`` points.

    ``seed`` is used by LOCKED_RNG and SEEDED; the other methods seed their
    generators from the system.
    """
    if workers < 1:
        raise ValueError(f"need at least one worker, got {workers}")
    if iterations < 0:
        raise ValueError(f"iterations must not be negative: {iterations}")
    per_worker = iterations // workers

    if method is Method.SEQUENTIAL:
        return sample(per_worker, random.Random())
    if method in (Method.RACE, Method.SPIN, Method.TURNS, Method.MUTEX):
        return _shared(method, workers, per_worker)
    if method is Method.ATOMIC:
        return _atomic(workers, per_worker)
    if method is Method.LOCAL_MUTEX:
        return _local_mutex(workers, per_worker)
    if method in (Method.SLOTS, Method.LOCAL_SLOTS):
        return _slots(method, workers, per_worker)
    return _channel(method, workers, per_worker, seed)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Monte Carlo estimation of pi.")
    parser.add_argument("-i", "--iterations", type=int, default=10_000_000,
                        help="# of iterations")
    parser.add_argument("-g", "--workers", type=int, default=None, help="# of workers")
    parser.add_argument("-s", "--seed", type=int, default=0, help="random seed")
    parser.add_argument("-m", "--method", choices=[m.value for m in Method],
                        default=Method.CHANNEL.value)
    args = parser.parse_args(argv)

    method = Method(args.method)
    workers = args.workers
    if workers is None:
        workers = 1 if method is Method.SEQUENTIAL else 2

    start = time.perf_counter()
    result = estimate_pi(args.iterations, workers, method, args.seed)
    elapsed = time.perf_counter() - start
    print(f"pi: {result} workers: {workers} time: {elapsed:.6f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())