import socket
import threading

import pytest

from local_socket_reply.channel import Channel, UnixSocketChannel
from local_socket_reply.errors import ConnectionError
from local_socket_reply.reply import LocalSocketReply, ReplyState
from local_socket_reply.request import Request


@pytest.fixture
def pair():
    ours, theirs = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    theirs.settimeout(1.0)
    channel = UnixSocketChannel(ours, write_timeout=1.0)
    yield channel, theirs
    channel.close()
    theirs.close()


def test_channel_satisfies_protocol(pair) -> None:
    channel, _ = pair
    assert isinstance(channel, Channel)


def test_flush_delivers_written_bytes(pair) -> None:
    channel, peer = pair
    channel.write(b"hello ")
    channel.write(b"world")
    channel.flush()
    assert peer.recv(64) == b"hello world"


def test_read_without_data_returns_empty(pair) -> None:
    channel, _ = pair
    assert channel.read(1024) == b""
    assert not channel.at_eof
    assert channel.wait_for_ready_read(0) is False


def test_ready_read_notifies_callbacks(pair) -> None:
    channel, peer = pair
    notified: list[bytes] = []
    channel.add_ready_read_callback(lambda: notified.append(channel.read(1024)))

    peer.sendall(b"payload")
    assert channel.wait_for_ready_read(1.0) is True
    assert notified == [b"payload"]


def test_peer_close_sets_eof(pair) -> None:
    channel, peer = pair
    peer.close()
    assert channel.wait_for_ready_read(1.0) is True
    assert channel.read(1024) == b""
    assert channel.at_eof


def test_close_is_idempotent(pair) -> None:
    channel, _ = pair
    channel.close()
    channel.close()
    assert not channel.is_open
    assert channel.read(10) == b""
    assert channel.wait_for_ready_read(0) is False
    with pytest.raises(OSError):
        channel.write(b"late")


def test_connect_to_missing_socket_raises(tmp_path) -> None:
    with pytest.raises(ConnectionError):
        UnixSocketChannel.connect(str(tmp_path / "missing.sock"), timeout=0.5)


def test_reply_over_socket_pair(pair) -> None:
    channel, peer = pair
    peer.sendall(b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n{\"type\":\"sync\"}\r\n")

    reply = LocalSocketReply(channel, version="1.2.3")
    reply.start(Request("GET", "/1.0"))
    while not reply.is_finished:
        assert channel.wait_for_ready_read(1.0)

    assert reply.state is ReplyState.FINISHED_SUCCESS
    assert reply.read_all() == b'{"type":"sync"}'
    assert peer.recv(1024).startswith(b"GET /1.0 HTTP/1.1\r\n")

    reply.close()
    assert not channel.is_open


def test_flush_leaves_channel_watching_for_reads(pair) -> None:
    channel, peer = pair
    channel.write(b"x" * 200_000)
    received = bytearray()

    def drain() -> None:
        while len(received) < 200_000:
            received.extend(peer.recv(65536))

    reader = threading.Thread(target=drain)
    reader.start()
    channel.flush()
    reader.join(2.0)
    assert len(received) == 200_000

    peer.sendall(b"reply")
    assert channel.wait_for_ready_read(1.0) is True
    assert channel.read(64) == b"reply"
