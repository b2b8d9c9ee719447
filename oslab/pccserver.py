"""A TCP server that counts printable characters in the files clients send."""

from __future__ import annotations

import re
import signal
import socket
import struct
import sys
import threading

PRINTABLE_FIRST = 32
PRINTABLE_LAST = 126
PRINTABLE_COUNT = PRINTABLE_LAST - PRINTABLE_FIRST + 1
CHUNK_SIZE = 1024

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF
_HEADER = struct.Struct("!I")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_port(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) & _U16 if match else 0


def _report(message: str, reason: object) -> None:
    print(f"\n Error : {message}. {reason} \n", file=sys.stderr, flush=True)


def count_printable(data: bytes | bytearray | memoryview) -> int:
    """Return how many bytes of ``data`` are printable ASCII (32 to 126)."""
    return sum(1 for byte in bytes(data) if PRINTABLE_FIRST <= byte <= PRINTABLE_LAST)


class PrintableCounter:
    """Per-character counts of printable bytes, kept as 16-bit counters."""

    def __init__(self) -> None:
        self.counts = [0] * PRINTABLE_COUNT
        self.total = 0

    def feed(self, data: bytes | bytearray | memoryview) -> int:
        """Count the printable bytes of ``data``; return how many there were."""
        found = 0
        for byte in bytes(data):
            if PRINTABLE_FIRST <= byte <= PRINTABLE_LAST:
                index = byte - PRINTABLE_FIRST
                self.counts[index] = (self.counts[index] + 1) & _U16
                found += 1
        self.total = (self.total + found) & _U32
        return found


def _recv_exact(conn: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


class PccServer:
    """Accepts one client at a time and keeps running totals per character."""

    def __init__(
        self,
        port: int,
        host: str = "",
        *,
        backlog: int = 10,
        poll_interval: float = 0.5,
    ) -> None:
        self.totals = [0] * PRINTABLE_COUNT
        self._stopping = threading.Event()
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
        except OSError:
            sock.close()
            raise
        sock.settimeout(poll_interval)
        self._sock = sock
        self.server_address = sock.getsockname()

    def __enter__(self) -> PccServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._sock.close()

    def serve_forever(self) -> None:
        """Serve clients until shutdown() is called, then close the listening socket."""
        try:
            while not self._stopping.is_set():
                try:
                    conn, _ = self._sock.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if self._stopping.is_set():
                        break
                    _report("Accept Failed", exc.strerror or exc)
                    continue
                with conn:
                    self.handle_connection(conn)
        finally:
            self._sock.close()

    def handle_connection(self, conn: socket.socket) -> int | None:
        """Read one length-prefixed file, count it and reply with the count.

        Returns the count sent back, or None if the exchange failed.
        """
        try:
            header = _recv_exact(conn, _HEADER.size)
        except OSError as exc:
            _report("Read Failed", exc.strerror or exc)
            return None
        if len(header) != _HEADER.size:
            _report("Read Failed", "short length header")
            return None
        (length,) = _HEADER.unpack(header)

        counter = PrintableCounter()
        received = 0
        while received < length:
            try:
                chunk = conn.recv(CHUNK_SIZE)
            except OSError as exc:
                _report("Read Failed", exc.strerror or exc)
                return None
            if not chunk:
                _report("Read Failed", "connection closed early")
                return None
            received += len(chunk)
            counter.feed(chunk)

        for index, count in enumerate(counter.counts):
            self.totals[index] = (self.totals[index] + count) & _U16

        try:
            conn.sendall(_HEADER.pack(counter.total))
        except OSError as exc:
            _report("Write Failed", exc.strerror or exc)
            return None
        return counter.total

    def shutdown(self) -> None:
        """Ask serve_forever() to stop once the current client is done."""
        self._stopping.set()

    def format_totals(self) -> str:
        """Return one line per printable character with its total count."""
        return "\n".join(
            f"char '{chr(index + PRINTABLE_FIRST)}' : {count} times"
            for index, count in enumerate(self.totals)
        )


def main(argv: list[str] | None = None) -> int:
    """Serve on the given port until interrupted, then print the totals."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: <server port>", file=sys.stderr, flush=True)
        return 1
    try:
        server = PccServer(_parse_port(args[0]))
    except OSError as exc:
        _report("Bind Failed", exc.strerror or exc)
        return 1

    previous = signal.signal(signal.SIGINT, lambda signum, frame: server.shutdown())
    try:
        server.serve_forever()
    finally:
        signal.signal(signal.SIGINT, previous)
    print(server.format_totals())
    return 0


if __name__ == "__main__":
    sys.exit(main())