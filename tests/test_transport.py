import httpx
import pytest
from channels import DummyChannel

from local_socket_reply.errors import ConnectionError
from local_socket_reply.transport import LocalSocketTransport


def make_client(channel: DummyChannel, **kwargs) -> httpx.Client:
    transport = LocalSocketTransport("/run/test.socket", channel_factory=lambda: channel, **kwargs)
    return httpx.Client(transport=transport, base_url="http://multipass")


def test_get_returns_parsed_response() -> None:
    channel = DummyChannel(b"HTTP/1.1 200 OK\r\n\r\nHELLO")
    with make_client(channel) as client:
        response = client.get("/1.0/instances")

    assert response.status_code == 200
    assert response.reason_phrase == "OK"
    assert response.content == b"HELLO"
    assert channel.written.startswith(b"GET /1.0/instances HTTP/1.1\r\nHost: multipass\r\n")
    assert channel.closed


def test_query_string_is_part_of_target() -> None:
    channel = DummyChannel(b"HTTP/1.1 200 OK\r\n\r\n[]")
    with make_client(channel) as client:
        client.get("/1.0/instances", params={"recursion": "1"})
    assert channel.written.startswith(b"GET /1.0/instances?recursion=1 HTTP/1.1\r\n")


def test_post_sends_content() -> None:
    channel = DummyChannel(b"HTTP/1.1 202 Accepted\r\n\r\n{}")
    with make_client(channel) as client:
        response = client.post("/1.0/instances", content=b"name=foo")

    assert response.status_code == 202
    assert b"Content-Type: application/x-www-form-urlencoded\r\n" in channel.written
    assert channel.written.endswith(b"Content-Length: 8\r\n\r\nname=foo\r\n")


def test_partial_deliveries_are_waited_for() -> None:
    channel = DummyChannel(b"", [b"HTTP/1.1 200 OK\r\n", b"\r\nHELLO"])
    with make_client(channel) as client:
        response = client.get("/")
    assert response.content == b"HELLO"


def test_http_error_is_returned_as_response() -> None:
    channel = DummyChannel(b"HTTP/1.1 404 Not Found\r\n\r\nmissing")
    with make_client(channel) as client:
        response = client.get("/1.0/instances/foo")

    assert response.status_code == 404
    assert response.reason_phrase == "Not Found"
    assert response.content == b"missing"
    with pytest.raises(httpx.HTTPStatusError):
        response.raise_for_status()


def test_chunked_flag_is_exposed_as_header() -> None:
    channel = DummyChannel(b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n5\r\nHELLO\r\n0\r\n\r\n")
    with make_client(channel) as client:
        response = client.get("/")
    assert response.headers["transfer-encoding"] == "chunked"
    assert response.content == b"HELLO"


def test_malformed_response_raises_protocol_error() -> None:
    channel = DummyChannel(b"garbage")
    with make_client(channel) as client:
        with pytest.raises(httpx.RemoteProtocolError, match="Malformed HTTP response"):
            client.get("/")
    assert channel.closed


def test_silence_aborts_with_timeout() -> None:
    channel = DummyChannel()
    with make_client(channel, read_timeout=0.01) as client:
        with pytest.raises(httpx.ReadTimeout):
            client.get("/")
    assert channel.closed


def test_connect_failure_raises_connect_error() -> None:
    def refuse() -> DummyChannel:
        raise ConnectionError("Cannot connect to /run/test.socket")

    transport = LocalSocketTransport("/run/test.socket", channel_factory=refuse)
    with httpx.Client(transport=transport, base_url="http://multipass") as client:
        with pytest.raises(httpx.ConnectError):
            client.get("/")


def test_default_factory_connects_to_socket_path(tmp_path) -> None:
    transport = LocalSocketTransport(str(tmp_path / "absent.sock"), connect_timeout=0.5)
    assert transport.socket_path.endswith("absent.sock")
    with httpx.Client(transport=transport, base_url="http://multipass") as client:
        with pytest.raises(httpx.ConnectError):
            client.get("/")


def test_read_failure_raises_read_error() -> None:
    channel = DummyChannel(b"HTTP/1.1 200 OK\r\n\r\nHELLO", fail_read=True)
    with make_client(channel) as client:
        with pytest.raises(httpx.ReadError, match="reset by peer"):
            client.get("/")
    assert channel.closed


def test_write_failure_raises_write_error() -> None:
    channel = DummyChannel(fail_write=True)
    with make_client(channel) as client:
        with pytest.raises(httpx.WriteError, match="peer went away"):
            client.get("/")
    assert channel.closed
