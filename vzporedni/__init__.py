"""Demonstrations of concurrent and distributed programming with threads, queues, locks and sockets."""

__version__ = "0.1.0"