"""Common channel abstractions."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

ReadyReadCallback = Callable[[], None]


@runtime_checkable
class Channel(Protocol):
    """A local duplex byte stream to the daemon."""

    @property
    def at_eof(self) -> bool: ...

    def write(self, data: bytes) -> None: ...

    def flush(self) -> None: ...

    def read(self, capacity: int) -> bytes: ...

    def add_ready_read_callback(self, callback: ReadyReadCallback) -> None: ...

    def remove_ready_read_callback(self, callback: ReadyReadCallback) -> None: ...

    def wait_for_ready_read(self, timeout: float | None = None) -> bool: ...

    def close(self) -> None: ...


__all__ = ["Channel", "ReadyReadCallback"]
