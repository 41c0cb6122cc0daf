"""A TCP client and server exchanging greetings as plain text or as structured messages."""

from __future__ import annotations

import argparse
import json
import socket
import socketserver
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
BUFFER_SIZE = 1024
DEFAULT_PORT = 9876


@dataclass(frozen=True)
class MessageAndTime:
    """A message together with the moment it was made."""

    message: str
    time: datetime

    def to_bytes(self) -> bytes:
        """Encode as one line of JSON."""
        payload = {"message": self.message, "time": self.time.isoformat()}
        return json.dumps(payload).encode("utf-8") + b"\n"

    @classmethod
    def from_bytes(cls, data: bytes) -> MessageAndTime:
        """Decode a line made by :meth:`to_bytes`."""
        try:
            payload = json.loads(data)
            return cls(str(payload["message"]), datetime.fromisoformat(payload["time"]))
        except (ValueError, KeyError, TypeError) as exc:
            raise ValueError(f"not a message: {data!r}") from exc


def stamp(message: str, now: datetime | None = None) -> str:
    """``message`` followed by `` @ `` and the time."""
    now = datetime.now() if now is None else now
    return f"{message} @ {now.strftime(DATE_FORMAT)}"


def reply_to(received: str, now: datetime | None = None) -> str:
    """Greet the part before the first ``@`` and stamp the reply with a new time."""
    now = datetime.now() if now is None else now
    return f"Hello {received.split('@')[0]}@ {now.strftime(DATE_FORMAT)}"


class _Handler(socketserver.BaseRequestHandler):
    server: _MessageServer

    def handle(self) -> None:
        if self.server.structured:
            self._handle_structured()
        else:
            self._handle_text()

    def _handle_text(self) -> None:
        received = self.request.recv(BUFFER_SIZE).decode("utf-8", "replace")
        print("Received message:", received, flush=True)
        time.sleep(self.server.delay)
        reply = reply_to(received)
        print("Sent message:", reply, flush=True)
        self.request.sendall(reply.encode("utf-8"))

    def _handle_structured(self) -> None:
        with self.request.makefile("rb") as stream:
            received = MessageAndTime.from_bytes(stream.readline())
        print("Received message:", received, flush=True)
        time.sleep(self.server.delay)
        reply = MessageAndTime("Hello " + received.message, datetime.now())
        print("Sent message:", reply, flush=True)
        self.request.sendall(reply.to_bytes())


class _MessageServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address: tuple[str, int], structured: bool, delay: float) -> None:
        self.structured = structured
        self.delay = delay
        super().__init__(address, _Handler)


def serve(address: tuple[str, int], structured: bool = False,
          delay: float = 5.0) -> socketserver.ThreadingTCPServer:
    """Bind a greeting server to ``address``; run it with ``serve_forever()``.

    Each client is handled in its own thread and waits ``delay`` seconds for its reply.
    """
    if delay < 0:
        raise ValueError(f"delay must not be negative: {delay}")
    return _MessageServer(address, structured, delay)


def send(address: tuple[str, int], message: str,
         structured: bool = False) -> str | MessageAndTime:
    """Send ``message`` to the server and return its reply."""
    kind = "struct" if structured else "string"
    with socket.create_connection(address) as conn:
        print(f"TCP ({kind}) client connected to {address[0]}:{address[1]}", flush=True)
        if structured:
            outgoing = MessageAndTime(message, datetime.now())
            print("Sent message:", outgoing, flush=True)
            conn.sendall(outgoing.to_bytes())
            with conn.makefile("rb") as stream:
                line = stream.readline()
            if not line:
                raise ConnectionError("server closed the connection without replying")
            reply: str | MessageAndTime = MessageAndTime.from_bytes(line)
        else:
            text = stamp(message)
            print("Sent message:", text, flush=True)
            conn.sendall(text.encode("utf-8"))
            reply = conn.recv(BUFFER_SIZE).decode("utf-8", "replace")
        print("Received message:", reply, flush=True)
        return reply


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="TCP greeting server and client.")
    parser.add_argument("-s", "--server", default="", help="server URL")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="port number")
    parser.add_argument("-m", "--message", default="world", help="message")
    parser.add_argument("--structured", action="store_true", help="send structured messages")
    parser.add_argument("--delay", type=float, default=5.0, help="server reply delay")
    args = parser.parse_args(argv)

    if args.server:
        send((args.server, args.port), args.message, args.structured)
        return 0

    kind = "struct" if args.structured else "string"
    with serve(("", args.port), args.structured, args.delay) as server:
        print(f"TCP ({kind}) server listening at {socket.gethostname()}:{args.port}", flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())