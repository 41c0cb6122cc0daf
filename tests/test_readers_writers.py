import threading

import pytest

from vzporedni.readers_writers import CountingReadLock, Library, Policy, run


def test_first_reader_locks_last_reader_unlocks_book():
    book = threading.Lock()
    lock = CountingReadLock(book)
    lock.acquire_read()
    lock.acquire_read()
    assert book.locked() is True
    assert lock.readers == 2
    lock.release_read()
    assert book.locked() is True
    lock.release_read()
    assert book.locked() is False


def test_writer_excluded_while_reading():
    book = threading.Lock()
    lock = CountingReadLock(book)
    lock.acquire_read()
    assert book.acquire(blocking=False) is False
    lock.release_read()
    lock.acquire_write()
    assert book.locked() is True
    lock.release_write()
    assert book.locked() is False


def test_release_read_without_acquire_raises():
    with pytest.raises(RuntimeError):
        CountingReadLock().release_read()


@pytest.mark.parametrize(
    "policy", [Policy.MUTEX, Policy.COUNTING, Policy.SEMAPHORE, Policy.RWLOCK]
)
def test_controlled_policies_never_overlap_writers(policy):
    library = run(writers=2, readers=1, cycles=3, policy=policy, unit=0.001)
    assert library.violations == 0
    for writer_id in (1, 2):
        starts = [e for e in library.events if e.startswith(f"Writer {writer_id} start")]
        assert starts == [f"Writer {writer_id} start {i}" for i in range(3)]


def test_rwlock_with_several_readers_is_safe():
    library = run(writers=2, readers=3, cycles=3, policy=Policy.RWLOCK, unit=0.001)
    assert library.violations == 0
    assert library.events.count("Writer 2 finish 2") == 1


def test_mutex_allows_one_reader_at_a_time():
    library = run(writers=1, readers=2, cycles=2, policy=Policy.MUTEX, unit=0.001)
    assert library.max_active_readers <= 1


def test_uncontrolled_policy_still_finishes_all_cycles():
    library = run(writers=2, readers=2, cycles=2, policy=Policy.NONE, unit=0.001)
    finishes = [e for e in library.events if e.startswith("Writer") and "finish" in e]
    assert len(finishes) == 4


def test_reader_stops_when_asked():
    library = Library(Policy.COUNTING, unit=0)
    stop = threading.Event()
    stop.set()
    assert library.reader(1, stop) == 0
    assert library.events == []


def test_negative_counts_rejected():
    with pytest.raises(ValueError):
        run(writers=-1, readers=0, cycles=1)