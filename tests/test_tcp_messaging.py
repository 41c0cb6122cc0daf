import contextlib
import threading
from datetime import datetime, timedelta

import pytest

from vzporedni.tcp_messaging import (
    DATE_FORMAT,
    MessageAndTime,
    reply_to,
    send,
    serve,
    stamp,
)


@contextlib.contextmanager
def running(structured):
    server = serve(("127.0.0.1", 0), structured, 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.server_address
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


def test_stamp_format():
    assert stamp("world", datetime(2024, 12, 2, 13, 9, 24)) == "world @ 2024-12-02 13:09:24"


def test_reply_replaces_time():
    now = datetime(2024, 12, 2, 13, 9, 29)
    assert reply_to("world @ 2024-12-02 13:09:24", now) == "Hello world @ 2024-12-02 13:09:29"


def test_reply_without_separator_keeps_whole_text():
    now = datetime(2024, 12, 2, 13, 9, 29)
    assert reply_to("abc", now) == "Hello abc@ " + now.strftime(DATE_FORMAT)


def test_message_round_trip():
    original = MessageAndTime("world", datetime(2024, 12, 2, 13, 9, 24, 123456))
    data = original.to_bytes()
    assert data.endswith(b"\n")
    assert MessageAndTime.from_bytes(data) == original


@pytest.mark.parametrize("data", [b"not json", b'{"message": "x"}', b'{"message": "x", "time": "soon"}'])
def test_from_bytes_rejects_garbage(data):
    with pytest.raises(ValueError):
        MessageAndTime.from_bytes(data)


def test_text_exchange():
    with running(False) as address:
        reply = send(address, "world")
    assert reply.startswith("Hello world @ ")
    sent_time = datetime.strptime(reply.split("@ ")[1], DATE_FORMAT)
    assert abs(datetime.now() - sent_time) < timedelta(minutes=1)


def test_structured_exchange():
    with running(True) as address:
        reply = send(address, "world", structured=True)
    assert reply.message == "Hello world"
    assert abs(datetime.now() - reply.time) < timedelta(minutes=1)


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        serve(("127.0.0.1", 0), False, -1)