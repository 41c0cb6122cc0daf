"""Several threads writing to and reading from one shared dictionary."""

from __future__ import annotations

import argparse
import contextlib
import threading
import time
from collections.abc import Sequence


def hammer(writers: int = 1, readers: int = 1, steps: int = 100,
           locked: bool = True) -> dict[int, int]:
    """Let writer ``i`` store ``0 .. steps-1`` under key ``i`` while readers read their keys.

    The dictionary starts with keys ``0 .. max(writers, readers)-1`` set to 0.
    With ``locked`` every access goes through one lock.  Returns the final
    dictionary, ordered by key.
    """
    if writers < 0 or readers < 0 or steps < 0:
        raise ValueError("writers, readers and steps must not be negative")
    table = {key: 0 for key in range(max(writers, readers))}
    guard = threading.Lock() if locked else contextlib.nullcontext()

    def write(key: int) -> None:
        for i in range(steps):
            with guard:
                table[key] = i

    def read(key: int) -> None:
        for _ in range(steps):
            with guard:
                _ = table[key]

    threads = [threading.Thread(target=write, args=(i,)) for i in range(writers)]
    threads += [threading.Thread(target=read, args=(i,)) for i in range(readers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return dict(sorted(table.items()))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Shared dictionary under concurrent access.")
    parser.add_argument("-gw", dest="writers", type=int, default=1,
                        help="# of writing threads")
    parser.add_argument("-gr", dest="readers", type=int, default=1,
                        help="# of reading threads")
    parser.add_argument("-s", dest="steps", type=int, default=100,
                        help="# of read or write steps")
    parser.add_argument("--unlocked", action="store_true", help="do not guard the dictionary")
    args = parser.parse_args(argv)

    start = time.perf_counter()
    table = hammer(args.writers, args.readers, args.steps, not args.unlocked)
    print("dict:", table, "time:", f"{time.perf_counter() - start:.6f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())