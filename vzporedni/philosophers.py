"""Dining philosophers with several fork-handling strategies."""

from __future__ import annotations

import argparse
import enum
import queue
import threading
import time
from collections.abc import Sequence

SEATS = 5
DELAY = 0.1


class Strategy(enum.Enum):
    """How the philosophers pick up their forks."""

    UNCONTROLLED = "uncontrolled"  # nobody guards the forks
    NAIVE_LOCKS = "naive"  # one lock per fork, deadlock is possible
    PICKING_LOCK = "picking"  # only one philosopher at a time picks up forks
    BACK_OFF = "backoff"  # put the first fork back if the second is taken
    ORDERED = "ordered"  # the last philosopher picks up forks in reverse order
    CHANNELS = "channels"  # forks are one-slot channels, ordered pick-up


class Table:
    """A round table with one fork between each pair of neighbours."""

    def __init__(self, strategy: Strategy = Strategy.ORDERED, seats: int = SEATS,
                 delay: float = DELAY) -> None:
        if seats < 2:
            raise ValueError(f"a table needs at least two seats, got {seats}")
        if delay < 0:
            raise ValueError(f"delay must not be negative: {delay}")
        self.strategy = strategy
        self.seats = seats
        self.delay = delay
        self._forks = [threading.Lock() for _ in range(seats)]
        self._channels = [queue.Queue(maxsize=1) for _ in range(seats)]
        self._picking = threading.Lock()

    def _fork_order(self, philosopher_id: int) -> tuple[int, int]:
        first, second = philosopher_id, (philosopher_id + 1) % self.seats
        if self.strategy in (Strategy.ORDERED, Strategy.CHANNELS) and philosopher_id == self.seats - 1:
            first, second = second, first
        return first, second

    def _take(self, fork: int) -> None:
        if self.strategy is Strategy.CHANNELS:
            self._channels[fork].put(1)
        elif self.strategy is not Strategy.UNCONTROLLED:
            self._forks[fork].acquire()

    def _release(self, fork: int) -> None:
        if self.strategy is Strategy.CHANNELS:
            self._channels[fork].get()
        elif self.strategy is not Strategy.UNCONTROLLED:
            self._forks[fork].release()

    def _pick_up(self, philosopher_id: int, first: int, second: int, say) -> None:
        if self.strategy is Strategy.BACK_OFF:
            while True:
                self._take(first)
                say(f"took fork {first} .")
                time.sleep(self.delay)
                if self._forks[second].acquire(blocking=False):
                    say(f"took fork {second} .")
                    return
                self._release(first)
                time.sleep(self.delay * (1 + 0.1 * (philosopher_id + 1)))

        if self.strategy is Strategy.PICKING_LOCK:
            with self._picking:
                self._take(first)
                say(f"took fork {first} .")
                time.sleep(self.delay)
                self._take(second)
        else:
            self._take(first)
            say(f"took fork {first} .")
            time.sleep(self.delay)
            self._take(second)
        say(f"took fork {second} .")

    def session(self, philosopher_id: int, dishes: int) -> list[str]:
        """Let one philosopher eat ``dishes`` times; returns what they did, in order."""
        if not 0 <= philosopher_id < self.seats:
            raise ValueError(f"no seat {philosopher_id} at a table of {self.seats}")
        events: list[str] = []

        def say(action: str) -> None:
            text = f"Philosopher {philosopher_id} {action}"
            print(text, flush=True)
            events.append(text)

        say("approached.")
        first, second = self._fork_order(philosopher_id)
        for dish in range(1, dishes + 1):
            say("is thinking.")
            time.sleep(self.delay)
            self._pick_up(philosopher_id, first, second, say)
            time.sleep(self.delay)
            say(f"is eating {dish} .")
            time.sleep(self.delay)
            self._release(first)
            self._release(second)
            say("put down the forks.")
            time.sleep(self.delay)
        say("left.")
        return events


def dine(dishes: int = 20, strategy: Strategy = Strategy.ORDERED, seats: int = SEATS,
         delay: float = DELAY) -> dict[int, list[str]]:
    """Seat all philosophers, let each eat ``dishes`` times and wait for all of them."""
    table = Table(strategy, seats, delay)
    results: dict[int, list[str]] = {}

    def run(philosopher_id: int) -> None:
        results[philosopher_id] = table.session(philosopher_id, dishes)

    threads = [threading.Thread(target=run, args=(i,)) for i in range(seats)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return dict(sorted(results.items()))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dining philosophers.")
    parser.add_argument("-d", "--dishes", type=int, default=20, help="# of dishes")
    parser.add_argument("-s", "--strategy", choices=[s.value for s in Strategy],
                        default=Strategy.ORDERED.value)
    parser.add_argument("--seats", type=int, default=SEATS)
    parser.add_argument("--delay", type=float, default=DELAY)
    args = parser.parse_args(argv)

    start = time.perf_counter()
    dine(args.dishes, Strategy(args.strategy), args.seats, args.delay)
    print(f"Time: {time.perf_counter() - start:.6f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())