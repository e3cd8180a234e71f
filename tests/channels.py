"""In-memory channel used by the reply, transport and client tests."""

from __future__ import annotations

from local_socket_reply.channel.base import ReadyReadCallback


class DummyChannel:
    """Scripted channel: each entry of ``deliveries`` is one readiness notification."""

    def __init__(self, *deliveries: bytes | list[bytes], fail_write: bool = False, fail_read: bool = False) -> None:
        self.written = bytearray()
        self.flushes = 0
        self.closed = False
        self.at_eof = False
        self.read_sizes: list[int] = []
        self._fail_write = fail_write
        self._fail_read = fail_read
        self._available: list[bytes] = []
        self._deliveries = list(deliveries)
        self._callbacks: list[ReadyReadCallback] = []

    def write(self, data: bytes) -> None:
        if self._fail_write:
            raise BrokenPipeError("peer went away")
        self.written += data

    def flush(self) -> None:
        self.flushes += 1

    def read(self, capacity: int) -> bytes:
        if self._fail_read and self._available:
            raise ConnectionResetError("reset by peer")
        if not self._available:
            return b""
        chunk = self._available.pop(0)
        if len(chunk) > capacity:
            self._available.insert(0, chunk[capacity:])
            chunk = chunk[:capacity]
        self.read_sizes.append(len(chunk))
        return chunk

    def feed(self, *chunks: bytes) -> None:
        self._available.extend(chunks)
        for callback in list(self._callbacks):
            callback()

    def hang_up(self) -> None:
        self.at_eof = True
        self.feed()

    def add_ready_read_callback(self, callback: ReadyReadCallback) -> None:
        self._callbacks.append(callback)

    def remove_ready_read_callback(self, callback: ReadyReadCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def wait_for_ready_read(self, timeout: float | None = None) -> bool:
        if not self._deliveries:
            return False
        delivery = self._deliveries.pop(0)
        if isinstance(delivery, bytes):
            delivery = [delivery]
        self.feed(*delivery)
        return True

    def close(self) -> None:
        self.closed = True
        self._callbacks.clear()

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)
