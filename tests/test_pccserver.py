import socket
import struct
import threading

import pytest

from oslab.pccserver import PccServer, PrintableCounter, count_printable, main


@pytest.fixture
def server():
    with PccServer(0, "127.0.0.1", poll_interval=0.05) as srv:
        yield srv


def test_count_printable_over_all_bytes():
    assert count_printable(bytes(range(256))) == 95


def test_count_printable_of_empty():
    assert count_printable(b"") == 0


def test_count_printable_ignores_controls_and_high_bytes():
    assert count_printable(b"\x00\x1f\x7f\xff") == 0


def test_counter_feed_accumulates():
    counter = PrintableCounter()
    first = counter.feed(b"ab\n")
    second = counter.feed(b"a~")
    assert first == count_printable(b"ab\n")
    assert counter.total == first + second
    assert counter.counts[ord("a") - 32] == 2
    assert sum(counter.counts) == counter.total


def test_handle_connection_counts_and_replies(server):
    payload = b"Hello World!\n\x00\xff"
    a, b = socket.socketpair()
    with a, b:
        a.sendall(struct.pack("!I", len(payload)) + payload)
        result = server.handle_connection(b)
        (reply,) = struct.unpack("!I", a.recv(4))
    assert reply == result == count_printable(payload)
    assert server.totals[ord("l") - 32] == payload.count(b"l")


def test_truncated_transfer_leaves_totals(server):
    a, b = socket.socketpair()
    with a, b:
        a.sendall(struct.pack("!I", 10) + b"abc")
        a.shutdown(socket.SHUT_WR)
        assert server.handle_connection(b) is None
    assert sum(server.totals) == 0


def test_short_header_fails(server):
    a, b = socket.socketpair()
    with a, b:
        a.sendall(b"\x00\x00")
        a.shutdown(socket.SHUT_WR)
        assert server.handle_connection(b) is None


def test_format_totals_lines(server):
    payload = b"aa b"
    a, b = socket.socketpair()
    with a, b:
        a.sendall(struct.pack("!I", len(payload)) + payload)
        server.handle_connection(b)
    lines = server.format_totals().split("\n")
    assert len(lines) == 95
    assert lines[0] == f"char ' ' : {payload.count(b' ')} times"
    assert f"char 'a' : {payload.count(b'a')} times" in lines
    assert lines[-1] == "char '~' : 0 times"


def test_serve_forever_handles_client_and_stops(server):
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    payload = b"xyz\tw"
    with socket.create_connection(server.server_address, timeout=5) as client:
        client.sendall(struct.pack("!I", len(payload)) + payload)
        data = b""
        while len(data) < 4:
            chunk = client.recv(4 - len(data))
            if not chunk:
                break
            data += chunk
    server.shutdown()
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert struct.unpack("!I", data)[0] == count_printable(payload)
    assert sum(server.totals) == count_printable(payload)


def test_main_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err