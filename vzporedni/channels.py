"""Channel demos: selecting over streams, broadcasts and letter pipelines."""

from __future__ import annotations

import argparse
import queue
import threading
import time
from collections.abc import Iterable, Iterator, Sequence

_CLOSED = object()


def _send(stream: queue.Queue, item: object, stop: threading.Event) -> bool:
    while not stop.is_set():
        try:
            stream.put(item, timeout=0.05)
            return True
        except queue.Full:
            continue
    return False


def writer(writer_id: int, stop: threading.Event, unit: float = 1.0) -> queue.Queue:
    """Start a thread that keeps sending ``message from <id>`` until ``stop`` is set.

    After each message it pauses ``(id*id + 1) * unit`` seconds.
    """
    stream: queue.Queue = queue.Queue(maxsize=1)

    def run() -> None:
        while _send(stream, f"message from {writer_id}", stop):
            if stop.wait((writer_id * writer_id + 1) * unit):
                break

    threading.Thread(target=run, daemon=True).start()
    return stream


def reader(
    streams: Sequence[queue.Queue],
    stop: threading.Event,
    timeout: float | None = None,
) -> list[str]:
    """Print messages from whichever stream has one until ``stop`` is set.

    When no message arrives for ``timeout`` seconds, ``timeout`` is reported.
    Returns everything that was printed, ending with ``Done``.
    """
    events: list[str] = []

    def emit(text: str) -> None:
        print(text, flush=True)
        events.append(text)

    last = time.monotonic()
    while True:
        if stop.is_set():
            emit("Done")
            return events
        got = False
        for stream in streams:
            try:
                message = stream.get_nowait()
            except queue.Empty:
                continue
            emit(message)
            got = True
        now = time.monotonic()
        if got:
            last = now
        elif timeout is not None and now - last >= timeout:
            emit("timeout")
            last = now
        else:
            time.sleep(0.001)


def letters_from_message(message: str) -> Iterator[str]:
    """Send the characters of ``message`` one by one from a separate thread."""
    print("getLettersFromMessage: start")
    stream: queue.Queue = queue.Queue(maxsize=1)

    def run() -> None:
        print("anonymous function: start")
        try:
            for letter in message:
                stream.put(letter)
        finally:
            stream.put(_CLOSED)
            print("anonymous function: done")

    threading.Thread(target=run, daemon=True).start()
    print("getLettersFromMessage: done")

    def drain() -> Iterator[str]:
        while (item := stream.get()) is not _CLOSED:
            yield item

    return drain()


def _to_upper(letter: str) -> str:
    upper = letter.upper()
    return upper if len(upper) == 1 else letter


def message_from_letters(letters: Iterable[str]) -> str:
    """Join the received letters, each turned into its single-character capital."""
    return "".join(_to_upper(letter) for letter in letters)


def speaker(message: str, delay: float = 5.0) -> threading.Event:
    """After ``delay`` seconds announce ``message`` and release all listeners."""
    announcement = threading.Event()

    def run() -> None:
        time.sleep(delay)
        print("Announcement:", message, flush=True)
        announcement.set()

    threading.Thread(target=run, daemon=True).start()
    return announcement


def listener(listener_id: int, announcement: threading.Event) -> int:
    """Wait for the announcement, then report completion; returns the listener id."""
    print("Listener", listener_id, "is waiting for an announcement.", flush=True)
    announcement.wait()
    print("Listener", listener_id, "completed.", flush=True)
    return listener_id


def _receive_value() -> int:
    stream: queue.Queue = queue.Queue(maxsize=1)
    threading.Thread(target=stream.put, args=(13,), daemon=True).start()
    return stream.get()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Channel demos.")
    sub = parser.add_subparsers(dest="demo", required=True)

    select = sub.add_parser("select", help="read from two writers at once")
    select.add_argument("--duration", type=float, default=20.0)
    select.add_argument("--timeout", type=float, default=None)
    select.add_argument("--unit", type=float, default=1.0)

    announce = sub.add_parser("announce", help="one speaker, several listeners")
    announce.add_argument("--delay", type=float, default=5.0)
    announce.add_argument("--listeners", type=int, default=5)

    caps = sub.add_parser("caps", help="capitalise a message through a channel")
    caps.add_argument("-m", "--message", default="Hello world!")

    sub.add_parser("value", help="receive one value from a thread")

    args = parser.parse_args(argv)

    if args.demo == "select":
        stop = threading.Event()
        streams = [writer(1, stop, args.unit), writer(2, stop, args.unit)]
        threading.Timer(args.duration, stop.set).start()
        reader(streams, stop, args.timeout)
    elif args.demo == "announce":
        announcement = speaker("Hello world for the last time!", args.delay)
        threads = [
            threading.Thread(target=listener, args=(i, announcement), daemon=True)
            for i in range(1, args.listeners)
        ]
        for thread in threads:
            thread.start()
        listener(0, announcement)
        print("Great!")
        for thread in threads:
            thread.join(timeout=1.0)
    elif args.demo == "caps":
        caps_message = message_from_letters(letters_from_message(args.message))
        print(args.message, " --> ", caps_message)
    else:
        print("Value:", _receive_value())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())