"""httpx transport that sends requests through local socket replies."""

from __future__ import annotations

from typing import Callable, Iterator

import httpx

from .channel.base import Channel
from .channel.unix import UnixSocketChannel
from .errors import ConnectionError, ErrorCategory
from .logger import BoundLogger, create_logger
from .reply import DEFAULT_READ_BUFFER_SIZE, LocalSocketReply
from .request import BytesBody, Request

ChannelFactory = Callable[[], Channel]


class ReplyByteStream(httpx.SyncByteStream):
    """Streams a finished reply's body into an ``httpx.Response``."""

    def __init__(self, reply: LocalSocketReply, chunk_size: int = DEFAULT_READ_BUFFER_SIZE) -> None:
        self._reply = reply
        self._chunk_size = chunk_size

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self._reply.read(self._chunk_size)
            if not chunk:
                break
            yield chunk

    def close(self) -> None:
        self._reply.close()


class LocalSocketTransport(httpx.BaseTransport):
    def __init__(
        self,
        socket_path: str,
        *,
        read_timeout: float = 60.0,
        connect_timeout: float = 5.0,
        channel_factory: ChannelFactory | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._socket_path = socket_path
        self._read_timeout = read_timeout
        self._connect_timeout = connect_timeout
        self._logger = (logger or create_logger()).child("transport")
        self._channel_factory = channel_factory or self._connect

    @property
    def socket_path(self) -> str:
        return self._socket_path

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        try:
            channel = self._channel_factory()
        except ConnectionError as exc:
            raise httpx.ConnectError(str(exc), request=request) from exc

        target = request.url.raw_path.decode("ascii")
        content = request.read()
        outgoing = BytesBody(content) if content else None

        reply = LocalSocketReply(channel, logger=self._logger)
        try:
            reply.start(Request(request.method, target), outgoing)
            if reply.io_error is not None:
                raise httpx.WriteError(reply.error_string, request=request) from reply.io_error
            self._wait_for_reply(reply, channel, request)
        except OSError as exc:
            reply.close()
            raise httpx.ReadError(f"Local socket read failed: {exc}", request=request) from exc
        except BaseException:
            reply.close()
            raise

        if reply.io_error is not None:
            raise httpx.ReadError(reply.error_string, request=request) from reply.io_error
        if reply.error is ErrorCategory.PROTOCOL_FAILURE:
            reply.close()
            raise httpx.RemoteProtocolError(reply.error_string, request=request)
        if reply.error is ErrorCategory.OPERATION_CANCELED:
            raise httpx.ReadTimeout(reply.error_string, request=request)

        self._logger.debug(
            "%s %s <- status=%s bytes=%d",
            request.method,
            target,
            reply.status_code,
            reply.bytes_available,
        )
        headers = [("Transfer-Encoding", "chunked")] if reply.chunked_transfer_encoding else []
        return httpx.Response(
            status_code=reply.status_code or 0,
            headers=headers,
            stream=ReplyByteStream(reply),
            extensions={"reason_phrase": reply.reason.encode("latin-1", errors="replace")},
            request=request,
        )

    def _wait_for_reply(self, reply: LocalSocketReply, channel: Channel, request: httpx.Request) -> None:
        while not reply.is_finished:
            if not channel.wait_for_ready_read(self._read_timeout):
                self._logger.warn("No reply from %s after %ss", self._socket_path, self._read_timeout)
                reply.abort()
                raise httpx.ReadTimeout(
                    f"Local socket read timeout after {self._read_timeout}s",
                    request=request,
                )

    def _connect(self) -> Channel:
        return UnixSocketChannel.connect(
            self._socket_path,
            timeout=self._connect_timeout,
            logger=self._logger,
        )


__all__ = ["LocalSocketTransport", "ReplyByteStream"]
