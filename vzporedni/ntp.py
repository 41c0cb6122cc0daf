"""A minimal NTP client: one request, one reply, and the estimated clock offset."""

from __future__ import annotations

import argparse
import datetime as dt
import socket
import struct
import time
from collections.abc import Sequence
from dataclasses import dataclass

NTP_EPOCH_OFFSET = 2208988800  # seconds from 1900-01-01 to 1970-01-01
NTP_PORT = 123
TELEGRAM_SIZE = 48
CLIENT_SETTINGS = 0x1B  # no leap warning, version 3, client mode
_FORMAT = struct.Struct(">BBbb11I")
_NS = 1_000_000_000
_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class Telegram:
    """An NTP v3 packet; requests and replies share the layout."""

    settings: int = 0
    stratum: int = 0
    poll: int = 0
    precision: int = 0
    root_delay: int = 0
    root_dispersion: int = 0
    reference_id: int = 0
    ref_time_sec: int = 0
    ref_time_frac: int = 0
    orig_time_sec: int = 0
    orig_time_frac: int = 0
    rx_time_sec: int = 0
    rx_time_frac: int = 0
    tx_time_sec: int = 0
    tx_time_frac: int = 0

    def pack(self) -> bytes:
        """The 48 big-endian bytes sent on the wire."""
        try:
            return _FORMAT.pack(
                self.settings, self.stratum, self.poll, self.precision,
                self.root_delay, self.root_dispersion, self.reference_id,
                self.ref_time_sec, self.ref_time_frac,
                self.orig_time_sec, self.orig_time_frac,
                self.rx_time_sec, self.rx_time_frac,
                self.tx_time_sec, self.tx_time_frac,
            )
        except struct.error as exc:
            raise ValueError(f"telegram field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> Telegram:
        """Decode the first 48 bytes of ``data``."""
        if len(data) < TELEGRAM_SIZE:
            raise ValueError(f"an NTP telegram needs {TELEGRAM_SIZE} bytes, got {len(data)}")
        return cls(*_FORMAT.unpack(data[:TELEGRAM_SIZE]))


def ntp_to_unix_ns(sec: int, frac: int) -> int:
    """Nanoseconds since the Unix epoch for NTP seconds and fraction (``frac / 2**32``)."""
    return (sec - NTP_EPOCH_OFFSET) * _NS + ((frac * _NS) >> 32)


def unix_ns_to_ntp(ns: int) -> tuple[int, int]:
    """NTP seconds and fraction for nanoseconds since the Unix epoch."""
    seconds, nanos = divmod(ns, _NS)
    return (seconds + NTP_EPOCH_OFFSET) & _MASK, ((nanos << 32) // _NS) & _MASK


def _half(value: int) -> int:
    return value // 2 if value >= 0 else -((-value) // 2)


def clock_offset(t1: int, t2: int, t3: int, t4: int) -> tuple[int, int]:
    """Round-trip delay and clock offset, in nanoseconds.

    ``t1`` client send, ``t2`` server receive, ``t3`` server send, ``t4`` client
    receive.  A positive offset means the client's clock is behind.
    """
    delta = (t4 - t1) - (t3 - t2)
    theta = (t3 + _half(delta)) - t4
    return delta, theta


@dataclass(frozen=True)
class NtpResult:
    """One exchange with an NTP server."""

    request: Telegram
    response: Telegram
    t1_ns: int
    t4_ns: int
    delta_ns: int
    theta_ns: int

    @property
    def reference_ns(self) -> int:
        return ntp_to_unix_ns(self.response.ref_time_sec, self.response.ref_time_frac)

    @property
    def t1_telegram_ns(self) -> int:
        return ntp_to_unix_ns(self.response.orig_time_sec, self.response.orig_time_frac)

    @property
    def t2_ns(self) -> int:
        return ntp_to_unix_ns(self.response.rx_time_sec, self.response.rx_time_frac)

    @property
    def t3_ns(self) -> int:
        return ntp_to_unix_ns(self.response.tx_time_sec, self.response.tx_time_frac)


def query(server: str | tuple[str, int] = "ntp1.arnes.si", timeout: float = 3.0) -> NtpResult:
    """Ask ``server`` (a host name, or a host and port) for the time."""
    host, port = (server, NTP_PORT) if isinstance(server, str) else server
    family, _, _, _, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
    with socket.socket(family, socket.SOCK_DGRAM) as sock:
        sock.settimeout(timeout)
        sock.connect(sockaddr)
        t1 = time.time_ns()
        sec, frac = unix_ns_to_ntp(t1)
        request = Telegram(settings=CLIENT_SETTINGS, tx_time_sec=sec, tx_time_frac=frac)
        sock.sendall(request.pack())
        data = sock.recv(512)
        t4 = time.time_ns()
    response = Telegram.unpack(data)
    t1_tel = ntp_to_unix_ns(response.orig_time_sec, response.orig_time_frac)
    t2 = ntp_to_unix_ns(response.rx_time_sec, response.rx_time_frac)
    t3 = ntp_to_unix_ns(response.tx_time_sec, response.tx_time_frac)
    delta, theta = clock_offset(t1_tel, t2, t3, t4)
    return NtpResult(request, response, t1, t4, delta, theta)


def _format_ns(ns: int) -> str:
    seconds, nanos = divmod(ns, _NS)
    moment = dt.datetime.fromtimestamp(seconds, tz=dt.timezone.utc)
    return f"{moment.strftime('%Y-%m-%d %H:%M:%S')}.{nanos:09d} +0000 UTC"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Query an NTP server once.")
    parser.add_argument("-s", "--server", default="ntp1.arnes.si", help="NTP server address")
    args = parser.parse_args(argv)

    result = query(args.server)
    print(f"Server: {args.server}")
    print(f"Telegram (req): {result.request}")
    print(f"Telegram (res): {result.response}")
    print(f"Tref : {_format_ns(result.reference_ns)}")
    print(f"T1   : {_format_ns(result.t1_ns)}")
    print(f"T1tel: {_format_ns(result.t1_telegram_ns)}")
    print(f"T2   : {_format_ns(result.t2_ns)}")
    print(f"T3   : {_format_ns(result.t3_ns)}")
    print(f"T4   : {_format_ns(result.t4_ns)}")
    print(f"delta: {result.delta_ns} ns = {result.delta_ns / 1e9} s")
    print(f"theta: {result.theta_ns} ns = {result.theta_ns / 1e9} s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())