"""Unix domain socket channel using the standard library socket module."""

from __future__ import annotations

import selectors
import socket

from ..errors import ConnectionError
from ..logger import BoundLogger, create_logger
from .base import ReadyReadCallback


class UnixSocketChannel:
    def __init__(
        self,
        sock: socket.socket,
        *,
        write_timeout: float = 60.0,
        logger: BoundLogger | None = None,
    ) -> None:
        sock.setblocking(False)
        self._socket: socket.socket | None = sock
        self._write_timeout = write_timeout
        self._logger = (logger or create_logger()).child("channel")
        self._selector = selectors.DefaultSelector()
        self._selector.register(sock, selectors.EVENT_READ)
        self._pending = bytearray()
        self._callbacks: list[ReadyReadCallback] = []
        self._at_eof = False

    @classmethod
    def connect(
        cls,
        path: str,
        *,
        timeout: float = 5.0,
        logger: BoundLogger | None = None,
    ) -> "UnixSocketChannel":
        bound = logger or create_logger()
        bound.debug("Connecting to unix socket %s", path)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(path)
        except OSError as exc:
            sock.close()
            raise ConnectionError(f"Cannot connect to {path}: {exc}", context=path) from exc
        return cls(sock, write_timeout=timeout, logger=bound)

    @property
    def at_eof(self) -> bool:
        return self._at_eof

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    def write(self, data: bytes) -> None:
        if self._socket is None:
            raise OSError("Channel is closed")
        self._pending += data

    def flush(self) -> None:
        if self._socket is None:
            raise OSError("Channel is closed")

        self._logger.debug("Channel sending bytes=%d", len(self._pending))
        self._selector.modify(self._socket, selectors.EVENT_WRITE)
        try:
            while self._pending:
                if not self._selector.select(self._write_timeout):
                    raise TimeoutError(f"Channel write timeout after {self._write_timeout}s")
                try:
                    sent = self._socket.send(self._pending)
                except BlockingIOError:
                    continue
                del self._pending[:sent]
        finally:
            self._selector.modify(self._socket, selectors.EVENT_READ)

    def read(self, capacity: int) -> bytes:
        if self._socket is None or self._at_eof:
            return b""
        try:
            data = self._socket.recv(capacity)
        except (BlockingIOError, InterruptedError):
            return b""
        if not data:
            self._logger.trace("Channel peer closed the connection")
            self._at_eof = True
        return data

    def add_ready_read_callback(self, callback: ReadyReadCallback) -> None:
        self._callbacks.append(callback)

    def remove_ready_read_callback(self, callback: ReadyReadCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def wait_for_ready_read(self, timeout: float | None = None) -> bool:
        """Block until the socket is readable and notify the ready callbacks.

        Returns ``False`` when nothing arrived within ``timeout`` seconds.
        """
        if self._socket is None:
            return False
        if not self._selector.select(timeout):
            return False
        for callback in list(self._callbacks):
            callback()
        return True

    def close(self) -> None:
        if self._socket is None:
            return
        self._callbacks.clear()
        try:
            self._selector.unregister(self._socket)
        except (KeyError, ValueError):
            pass
        self._selector.close()
        self._socket.close()
        self._socket = None
        self._logger.trace("Channel closed")


__all__ = ["UnixSocketChannel"]
