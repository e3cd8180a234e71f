"""Request descriptors and the HTTP/1.1 request encoder."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from typing import BinaryIO, Protocol, runtime_checkable

from .version import __version__

BODY_VERBS = frozenset({"POST", "PUT"})
FORM_CONTENT_TYPE = b"application/x-www-form-urlencoded"


@runtime_checkable
class BodySource(Protocol):
    def open(self) -> None: ...

    def size(self) -> int: ...

    def read_all(self) -> bytes: ...


class BytesBody:
    """In-memory request body."""

    def __init__(self, data: bytes | str) -> None:
        self._data = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def open(self) -> None:
        pass

    def size(self) -> int:
        return len(self._data)

    def read_all(self) -> bytes:
        return self._data


class StreamBody:
    """Request body backed by a seekable binary file object."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def open(self) -> None:
        self._stream.seek(0)

    def size(self) -> int:
        try:
            return os.fstat(self._stream.fileno()).st_size
        except (AttributeError, OSError, io.UnsupportedOperation):
            position = self._stream.tell()
            end = self._stream.seek(0, io.SEEK_END)
            self._stream.seek(position)
            return end

    def read_all(self) -> bytes:
        return self._stream.read()


@dataclass(frozen=True)
class Request:
    verb: str
    target: str

    def __post_init__(self) -> None:
        if not self.verb or not self.verb.isascii() or not self.verb.isupper():
            raise ValueError(f"HTTP verb must be uppercase ASCII: {self.verb!r}")

    @property
    def carries_body(self) -> bool:
        return self.verb in BODY_VERBS


def encode_request(
    verb: str,
    target: str,
    outgoing: BodySource | None = None,
    *,
    version: str = __version__,
) -> bytes:
    """Serialize a request line, the fixed headers and an optional body.

    ``Host`` can be anything for a local socket, so it is always ``multipass``.
    For POST and PUT a form Content-Type is always sent; Content-Length and the
    body only follow when ``outgoing`` is given. Bodies for other verbs are
    ignored.
    """
    request = Request(verb, target)

    data = bytearray()
    data += f"{request.verb} {request.target} HTTP/1.1\r\n".encode("utf-8")
    data += b"Host: multipass\r\n"
    data += b"User-Agent: Multipass/" + version.encode("ascii") + b"\r\n"

    if request.carries_body:
        data += b"Content-Type: " + FORM_CONTENT_TYPE + b"\r\n"

        if outgoing is not None:
            outgoing.open()
            data += b"Content-Length: " + str(outgoing.size()).encode("ascii") + b"\r\n\r\n"
            data += outgoing.read_all()

    data += b"\r\n"
    return bytes(data)


__all__ = ["BodySource", "BytesBody", "Request", "StreamBody", "encode_request"]
