"""Greeting demos: threads printing, joining and talking over queues."""

from __future__ import annotations

import argparse
import queue
import threading
import time
from collections.abc import Iterable, Sequence

PRINTOUTS = 10
DELAY = 0.001

_CLOSED = object()


def hello(word: str = "hello world", printouts: int = PRINTOUTS, delay: float = DELAY) -> list[str]:
    """Print ``word`` followed by a space ``printouts`` times, pausing between prints."""
    printed = []
    for _ in range(printouts):
        print(word, end=" ", flush=True)
        printed.append(word)
        time.sleep(delay)
    return printed


def greet_concurrently(
    words: Iterable[str], printouts: int = PRINTOUTS, delay: float = DELAY
) -> list[str]:
    """Run one greeting thread per word, wait for all of them (fork-join).

    Returns the words in the order they were actually printed.
    """
    order: list[str] = []
    lock = threading.Lock()

    def greet(word: str) -> None:
        for _ in range(printouts):
            with lock:
                print(word, end=" ", flush=True)
                order.append(word)
            time.sleep(delay)

    threads = [threading.Thread(target=greet, args=(word,)) for word in words]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return order


def _channel(capacity: int) -> queue.Queue:
    if capacity < 0:
        raise ValueError(f"channel capacity must not be negative: {capacity}")
    # an unbuffered channel is approximated by a single free slot
    return queue.Queue(maxsize=max(capacity, 1))


def greet_through_channel(
    words: Sequence[str], printouts: int = PRINTOUTS, capacity: int = 0
) -> list[str]:
    """Each word's thread sends ``word-i`` messages into a shared channel.

    The caller receives exactly as many messages as were sent and returns them
    in the order they were received.
    """
    stream = _channel(capacity)

    def send(word: str) -> None:
        print("Goroutine", word, "start")
        for i in range(printouts):
            stream.put(f"{word}-{i}")
        print("Goroutine", word, "done")

    threads = [threading.Thread(target=send, args=(word,), daemon=True) for word in words]
    for thread in threads:
        thread.start()

    received = []
    for _ in range(len(words) * printouts):
        message = stream.get()
        print(message, end=" ", flush=True)
        received.append(message)
    print()
    for thread in threads:
        thread.join()
    return received


def read_closed_channel(
    word: str = "hello-world", printouts: int = PRINTOUTS, reads: int | None = None
) -> list[tuple[str, bool]]:
    """Read from a channel that the sending thread closes when it is done.

    With ``reads`` given, exactly that many receives are made; a receive on the
    closed channel yields ``("", False)``.  With ``reads`` left out the channel
    is drained until it is closed.
    """
    stream = _channel(0)

    def send() -> None:
        print("Goroutine", word, "start")
        try:
            for i in range(printouts):
                stream.put(f"{word}-{i}")
            print("Goroutine", word, "done")
        finally:
            stream.put(_CLOSED)

    thread = threading.Thread(target=send, daemon=True)
    thread.start()

    results: list[tuple[str, bool]] = []
    closed = False
    count = 0
    while reads is None or count < reads:
        count += 1
        item = _CLOSED if closed else stream.get()
        if item is _CLOSED:
            closed = True
            if reads is None:
                break
            results.append(("", False))
            print(f"({False})", end=" ")
        else:
            results.append((item, True))
            print(f"{item}({True})" if reads is not None else item, end=" ")
    print()
    thread.join()
    return results


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Greeting demos with threads and channels.")
    parser.add_argument(
        "mode",
        nargs="?",
        default="sequential",
        choices=["sequential", "concurrent", "channel", "closed"],
    )
    parser.add_argument("-n", "--printouts", type=int, default=PRINTOUTS)
    parser.add_argument("-b", "--capacity", type=int, default=0, help="channel capacity")
    parser.add_argument("-w", "--words", nargs="+", default=None)
    args = parser.parse_args(argv)

    if args.mode == "sequential":
        hello(printouts=args.printouts)
        print()
    elif args.mode == "concurrent":
        greet_concurrently(args.words or ["hello", "world"], args.printouts)
        print()
    elif args.mode == "channel":
        greet_through_channel(args.words or ["hello", "world"], args.printouts, args.capacity)
    else:
        read_closed_channel(printouts=args.printouts, reads=args.printouts + 1)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())