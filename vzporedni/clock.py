"""Wall-clock time versus monotonic time."""

from __future__ import annotations

import argparse
import datetime as dt
import time
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Measurement:
    """Start and end of an interval read from both clocks, in nanoseconds."""

    start_ns: int
    end_ns: int
    start_monotonic_ns: int
    end_monotonic_ns: int

    @property
    def wall_elapsed(self) -> float:
        """Elapsed seconds by the wall clock."""
        return (self.end_ns - self.start_ns) / 1e9

    @property
    def monotonic_elapsed(self) -> float:
        """Elapsed seconds by the monotonic clock."""
        return (self.end_monotonic_ns - self.start_monotonic_ns) / 1e9


def measure(duration: float = 1.0) -> Measurement:
    """Sleep ``duration`` seconds and read both clocks before and after."""
    if duration < 0:
        raise ValueError(f"duration must not be negative: {duration}")
    start_ns, start_mono = time.time_ns(), time.monotonic_ns()
    time.sleep(duration)
    end_ns, end_mono = time.time_ns(), time.monotonic_ns()
    return Measurement(start_ns, end_ns, start_mono, end_mono)


def _format(wall_ns: int, mono_ns: int) -> str:
    moment = dt.datetime.fromtimestamp(wall_ns / 1e9, tz=dt.timezone.utc)
    return f"{moment.isoformat(sep=' ')} m=+{mono_ns / 1e9:.9f}"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare wall-clock and monotonic time.")
    parser.add_argument("--warmup", type=float, default=2.0)
    parser.add_argument("--duration", type=float, default=1.0)
    args = parser.parse_args(argv)

    time.sleep(args.warmup)
    result = measure(args.duration)
    print(f"Time start: {_format(result.start_ns, result.start_monotonic_ns)}")
    print(f"Time end  : {_format(result.end_ns, result.end_monotonic_ns)}")
    print(f"Time elapsed (wall-clock): {result.wall_elapsed}s")
    print(f"Time elapsed (monotonic) : {result.monotonic_elapsed}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())