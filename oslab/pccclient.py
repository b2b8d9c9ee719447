"""A client that sends a file to the printable-character counting server."""

from __future__ import annotations

import os
import re
import socket
import struct
import sys

CHUNK_SIZE = 1024

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF
_HEADER = struct.Struct("!I")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class _ConnectError(OSError):
    """The server could not be reached."""


def _parse_port(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) & _U16 if match else 0


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


def send_file(host: str, port: int, path: str | os.PathLike[str]) -> int:
    """Send the file at ``path`` and return the server's printable-character count."""
    with open(path, "rb") as source:
        size = os.fstat(source.fileno()).st_size
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.connect((host, port))
            except OSError as exc:
                raise _ConnectError(exc.errno, exc.strerror or str(exc)) from exc
            sock.sendall(_HEADER.pack(size & _U32))
            while chunk := source.read(CHUNK_SIZE):
                sock.sendall(chunk)
            reply = _recv_exact(sock, _HEADER.size)
    if len(reply) != _HEADER.size:
        raise ConnectionError("server closed the connection before replying")
    return _HEADER.unpack(reply)[0]


def main(argv: list[str] | None = None) -> int:
    """Send a file to the server and print how many printable characters it holds."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print(
            "Usage: <ip of server> <port of server> <path of file to send>",
            file=sys.stderr,
            flush=True,
        )
        return 1
    host, port_text, path = args
    try:
        count = send_file(host, _parse_port(port_text), path)
    except _ConnectError as exc:
        print(f"Error : Connect Failed. {exc.strerror}", file=sys.stderr, flush=True)
        return 1
    except OSError as exc:
        if exc.filename == path:
            print(f"Error: Problem opening file. {exc.strerror}", file=sys.stderr, flush=True)
        else:
            print(f"Error : Transfer Failed. {exc.strerror or exc}", file=sys.stderr, flush=True)
        return 1
    print(f"# of printable characters: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())