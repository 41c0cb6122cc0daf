"""Producers and consumers sharing a bounded buffer."""

from __future__ import annotations

import argparse
import queue
import threading
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

_DONE = object()


@dataclass(frozen=True)
class Product:
    """A product made by a producer."""

    id: int


def create_product(producer_id: int, task_id: int) -> Product:
    """Make product number ``task_id`` of producer ``producer_id``."""
    product = Product(10 * producer_id + task_id)
    print("P   ", producer_id, product.id, flush=True)
    return product


class BoundedBuffer:
    """A FIFO buffer of fixed size guarded by a lock and two condition variables."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"buffer size must be at least 1, got {size}")
        self.size = size
        self._items: deque = deque()
        lock = threading.Lock()
        self._not_full = threading.Condition(lock)
        self._not_empty = threading.Condition(lock)

    def __len__(self) -> int:
        with self._not_full:
            return len(self._items)

    def put(self, item: object) -> None:
        """Add ``item``, waiting while the buffer is full."""
        with self._not_full:
            while len(self._items) == self.size:
                self._not_full.wait()
            self._items.append(item)
            self._not_empty.notify()

    def get(self) -> object:
        """Remove and return the oldest item, waiting while the buffer is empty."""
        with self._not_empty:
            while not self._items:
                self._not_empty.wait()
            item = self._items.popleft()
            self._not_full.notify()
            return item


def run(
    producers: int = 1,
    consumers: int = 1,
    buffer_size: int = 1,
    products: int = 5,
    use_queue: bool = False,
) -> list[tuple[int, Product]]:
    """Run producers and consumers until every product has been consumed.

    With ``use_queue`` the products pass through a queue one slot smaller than
    the buffer (a single slot at least) instead of the bounded buffer.
    Returns ``(consumer, product)`` pairs in the order they were consumed.
    """
    if producers < 0 or consumers < 1 or products < 0:
        raise ValueError("need at least one consumer and no negative counts")
    if buffer_size < 1:
        raise ValueError(f"buffer size must be at least 1, got {buffer_size}")

    if use_queue:
        channel: queue.Queue = queue.Queue(maxsize=max(buffer_size - 1, 1))
        put, get = channel.put, channel.get
    else:
        buffer = BoundedBuffer(buffer_size)
        put, get = buffer.put, buffer.get

    consumed: list[tuple[int, Product]] = []
    lock = threading.Lock()

    def produce(producer_id: int) -> None:
        for task_id in range(1, products + 1):
            product = create_product(producer_id, task_id)
            print("P->b", producer_id, product.id, flush=True)
            put(product)

    def consume(consumer_id: int) -> None:
        while (product := get()) is not _DONE:
            print("\tb->C", consumer_id, product.id, flush=True)
            with lock:
                consumed.append((consumer_id, product))
            print("\tC   ", consumer_id, product.id, flush=True)

    producer_threads = [
        threading.Thread(target=produce, args=(i,)) for i in range(1, producers + 1)
    ]
    consumer_threads = [
        threading.Thread(target=consume, args=(i,)) for i in range(1, consumers + 1)
    ]
    for thread in producer_threads + consumer_threads:
        thread.start()
    for thread in producer_threads:
        thread.join()
    for _ in consumer_threads:
        put(_DONE)
    for thread in consumer_threads:
        thread.join()
    return consumed


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Producers and consumers.")
    parser.add_argument("-p", "--producers", type=int, default=1, help="# of producers")
    parser.add_argument("-c", "--consumers", type=int, default=1, help="# of consumers")
    parser.add_argument("-b", "--buffer", type=int, default=1, help="buffer size")
    parser.add_argument("-n", "--products", type=int, default=5,
                        help="number of products per producer")
    parser.add_argument("--queue", action="store_true", help="pass products through a queue")
    args = parser.parse_args(argv)
    run(args.producers, args.consumers, args.buffer, args.products, args.queue)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())