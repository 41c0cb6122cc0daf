"""Starvation and livelock demonstrations."""

from __future__ import annotations

import argparse
import queue
import threading
import time
from collections.abc import Sequence


def polite_worker(lock: threading.Lock, runtime: float) -> int:
    """Take the lock three times briefly per iteration until ``runtime`` passes."""
    count = 0
    start = time.monotonic()
    while time.monotonic() - start < runtime:
        for _ in range(3):
            with lock:
                time.sleep(1e-9)
        count += 1
    print("Polite worker:", count, "iterations.", flush=True)
    return count


def greedy_worker(lock: threading.Lock, runtime: float) -> int:
    """Take the lock once for longer per iteration until ``runtime`` passes."""
    count = 0
    start = time.monotonic()
    while time.monotonic() - start < runtime:
        with lock:
            time.sleep(3e-9)
        count += 1
    print("Greedy worker:", count, "iterations.", flush=True)
    return count


def starvation(runtime: float = 1.0) -> tuple[int, int]:
    """Run a polite and a greedy worker on one lock; returns their iteration counts."""
    if runtime < 0:
        raise ValueError(f"runtime must not be negative: {runtime}")
    lock = threading.Lock()
    counts: dict[str, int] = {}

    def run(name: str, worker) -> None:
        counts[name] = worker(lock, runtime)

    threads = [
        threading.Thread(target=run, args=("polite", polite_worker)),
        threading.Thread(target=run, args=("greedy", greedy_worker)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return counts["polite"], counts["greedy"]


def livelock(attempts: int = 10, period: float = 1.0) -> dict[int, int | None]:
    """Two people each take their own fork, then try the other's; on failure they back off.

    A ticker lets both try again every ``period`` seconds, for ``attempts`` rounds.
    Returns, for each person, the try on which they got both forks, or None.
    """
    if attempts < 0:
        raise ValueError(f"attempts must not be negative: {attempts}")
    forks = [threading.Lock(), threading.Lock()]
    signals: queue.Queue[bool] = queue.Queue()
    hold = period / 10
    results: dict[int, int | None] = {}

    def ticker() -> None:
        for _ in range(attempts):
            time.sleep(period)
            signals.put(True)
            signals.put(True)
        signals.put(False)
        signals.put(False)

    def person(pid: int) -> None:
        own_id, other_id = pid, (pid + 1) % 2
        own, other = forks[own_id], forks[other_id]
        tries = 0
        while signals.get():
            tries += 1
            own.acquire()
            print("Person", pid, "took fork", own_id, flush=True)
            time.sleep(hold)
            if other.acquire(blocking=False):
                print("Person", pid, "took fork", other_id, flush=True)
                own.release()
                print("Person", pid, "released fork", own_id, flush=True)
                other.release()
                print("Person", pid, "released fork", other_id, flush=True)
                results[pid] = tries
                return
            own.release()
            print("Person", pid, "released fork", own_id, flush=True)
            time.sleep(hold)
        results[pid] = None

    threading.Thread(target=ticker, daemon=True).start()
    threads = [threading.Thread(target=person, args=(pid,)) for pid in (0, 1)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return dict(sorted(results.items()))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Starvation and livelock demos.")
    sub = parser.add_subparsers(dest="demo", required=True)
    starve = sub.add_parser("starvation")
    starve.add_argument("-t", "--runtime", type=float, default=1.0, help="runtime in seconds")
    live = sub.add_parser("livelock")
    live.add_argument("-a", "--attempts", type=int, default=10)
    live.add_argument("--period", type=float, default=1.0)
    args = parser.parse_args(argv)

    if args.demo == "starvation":
        starvation(args.runtime)
    else:
        livelock(args.attempts, args.period)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())