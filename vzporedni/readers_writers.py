"""Readers and writers sharing one book under different locking policies."""

from __future__ import annotations

import argparse
import contextlib
import enum
import threading
import time
from collections.abc import Iterator, Sequence


class Policy(enum.Enum):
    """How access to the book is controlled."""

    NONE = "none"  # no control at all
    MUTEX = "mutex"  # one lock for everyone
    COUNTING = "counting"  # readers are counted, the first locks and the last unlocks
    SEMAPHORE = "semaphore"  # as COUNTING, with a one-slot semaphore for the book
    RWLOCK = "rwlock"  # a read-write lock


class _MutexBook:
    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire_read(self) -> None:
        self._lock.acquire()

    def release_read(self) -> None:
        self._lock.release()

    def acquire_write(self) -> None:
        self._lock.acquire()

    def release_write(self) -> None:
        self._lock.release()


class CountingReadLock:
    """Readers share the book; the first reader in locks it, the last one out unlocks it."""

    def __init__(self, book=None) -> None:
        self._book = threading.Lock() if book is None else book
        self._count_lock = threading.Lock()
        self._readers = 0

    @property
    def readers(self) -> int:
        return self._readers

    def acquire_read(self) -> None:
        with self._count_lock:
            self._readers += 1
            if self._readers == 1:
                self._book.acquire()

    def release_read(self) -> None:
        with self._count_lock:
            if self._readers == 0:
                raise RuntimeError("release_read without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._book.release()

    def acquire_write(self) -> None:
        self._book.acquire()

    def release_write(self) -> None:
        self._book.release()


class _ReadWriteLock:
    """Many readers or one writer; waiting writers keep new readers out."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release_read without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write without a matching acquire_write")
            self._writer = False
            self._cond.notify_all()


def _make_lock(policy: Policy):
    """The lock guarding the book, or None when access is not controlled."""
    if policy is Policy.NONE:
        return None
    if policy is Policy.MUTEX:
        return _MutexBook()
    if policy is Policy.COUNTING:
        return CountingReadLock()
    if policy is Policy.SEMAPHORE:
        return CountingReadLock(threading.Semaphore(1))
    return _ReadWriteLock()


class Library:
    """The shared book, its lock, and a record of who used it when."""

    def __init__(self, policy: Policy = Policy.RWLOCK, unit: float = 0.001) -> None:
        if unit < 0:
            raise ValueError(f"unit must not be negative: {unit}")
        self.policy = policy
        self.unit = unit
        self.events: list[str] = []
        self.violations = 0
        self.max_active_readers = 0
        self._book = _make_lock(policy)
        self._state = threading.Lock()
        self._active_readers = 0
        self._active_writers = 0

    @contextlib.contextmanager
    def _reading(self) -> Iterator[None]:
        if self._book is None:
            yield
            return
        self._book.acquire_read()
        try:
            yield
        finally:
            self._book.release_read()

    @contextlib.contextmanager
    def _writing(self) -> Iterator[None]:
        if self._book is None:
            yield
            return
        self._book.acquire_write()
        try:
            yield
        finally:
            self._book.release_write()

    def _log(self, text: str) -> None:
        print(text, flush=True)
        self.events.append(text)

    def _start_writing(self, text: str) -> None:
        with self._state:
            if self._active_readers or self._active_writers:
                self.violations += 1
            self._active_writers += 1
            self._log(text)

    def _finish_writing(self, text: str) -> None:
        with self._state:
            self._active_writers -= 1
            self._log(text)

    def _start_reading(self, text: str) -> None:
        with self._state:
            if self._active_writers:
                self.violations += 1
            self._active_readers += 1
            self.max_active_readers = max(self.max_active_readers, self._active_readers)
            self._log(text)

    def _finish_reading(self, text: str) -> None:
        with self._state:
            self._active_readers -= 1
            self._log(text)

    def writer(self, writer_id: int, cycles: int) -> None:
        """Write into the book ``cycles`` times."""
        pause = writer_id * self.unit
        for i in range(cycles):
            with self._writing():
                self._start_writing(f"Writer {writer_id} start {i}")
                time.sleep(pause)
                self._finish_writing(f"Writer {writer_id} finish {i}")
            time.sleep(pause)

    def reader(self, reader_id: int, stop: threading.Event) -> int:
        """Keep reading the book until ``stop`` is set; returns the number of reads."""
        pause = reader_id * self.unit
        reads = 0
        while not stop.is_set():
            with self._reading():
                self._start_reading(f"Reader {reader_id} start")
                time.sleep(pause)
                self._finish_reading(f"Reader {reader_id} finish")
            reads += 1
            time.sleep(pause)
        return reads


def run(writers: int = 2, readers: int = 4, cycles: int = 10,
        policy: Policy = Policy.RWLOCK, unit: float = 0.001) -> Library:
    """Start writers and readers, wait for the writers, then stop the readers."""
    if writers < 0 or readers < 0 or cycles < 0:
        raise ValueError("writers, readers and cycles must not be negative")
    library = Library(policy, unit)
    stop = threading.Event()
    writer_threads = [
        threading.Thread(target=library.writer, args=(i, cycles)) for i in range(1, writers + 1)
    ]
    reader_threads = [
        threading.Thread(target=library.reader, args=(i, stop), daemon=True)
        for i in range(1, readers + 1)
    ]
    for thread in writer_threads + reader_threads:
        thread.start()
    for thread in writer_threads:
        thread.join()
    stop.set()
    for thread in reader_threads:
        thread.join()
    return library


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Readers and writers.")
    parser.add_argument("-w", "--writers", type=int, default=2, help="# of writers")
    parser.add_argument("-r", "--readers", type=int, default=4, help="# of readers")
    parser.add_argument("-c", "--cycles", type=int, default=10, help="# of cycles")
    parser.add_argument("-p", "--policy", choices=[p.value for p in Policy],
                        default=Policy.RWLOCK.value)
    parser.add_argument("--unit", type=float, default=0.001)
    args = parser.parse_args(argv)
    run(args.writers, args.readers, args.cycles, Policy(args.policy), args.unit)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())