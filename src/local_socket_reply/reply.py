"""Reply object for one HTTP exchange over a local socket channel."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from .channel.base import Channel
from .errors import ErrorCategory
from .logger import BoundLogger, create_logger
from .parser import ParsedStatus, parse_response
from .request import BodySource, Request, encode_request
from .version import __version__

DEFAULT_READ_BUFFER_SIZE = 65536
OPERATION_CANCELED = "Operation canceled"

FinishedCallback = Callable[[], None]
ErrorCallback = Callable[[ErrorCategory], None]


class ReplyState(str, Enum):
    OPEN = "open"
    FINISHED_SUCCESS = "finished_success"
    FINISHED_ERROR = "finished_error"
    ABORTED = "aborted"


class LocalSocketReply:
    """Sends one request over ``channel`` and collects the response.

    The reply is driven by the channel's readiness notifications: each
    notification drains the channel, and once a drain comes up empty the
    accumulated bytes are parsed and the reply finishes. Error callbacks run
    before finished callbacks and each runs at most once per reply.
    """

    def __init__(
        self,
        channel: Channel,
        *,
        read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
        version: str = __version__,
        logger: BoundLogger | None = None,
    ) -> None:
        if read_buffer_size <= 0:
            raise ValueError("read_buffer_size must be positive")
        self._channel: Channel | None = channel
        self._read_buffer_size = read_buffer_size
        self._version = version
        self._logger = (logger or create_logger()).child("reply")

        self._state = ReplyState.OPEN
        self._started = False
        self._delivering = False
        self._raw = bytearray()
        self._content = b""
        self._offset = 0

        self.status: ParsedStatus | None = None
        self.chunked_transfer_encoding = False
        self.error: ErrorCategory | None = None
        self.error_string = ""
        self.io_error: OSError | None = None

        self._finished_callbacks: list[FinishedCallback] = []
        self._error_callbacks: list[ErrorCallback] = []

        channel.add_ready_read_callback(self.on_ready_read)

    @property
    def state(self) -> ReplyState:
        return self._state

    @property
    def is_finished(self) -> bool:
        return self._state is not ReplyState.OPEN

    @property
    def status_code(self) -> int | None:
        return self.status.code if self.status else None

    @property
    def reason(self) -> str:
        return self.status.message if self.status else ""

    @property
    def bytes_available(self) -> int:
        return len(self._content) - self._offset

    @property
    def at_end(self) -> bool:
        return self.is_finished and self._offset >= len(self._content)

    def add_finished_callback(self, callback: FinishedCallback) -> None:
        self._finished_callbacks.append(callback)

    def add_error_callback(self, callback: ErrorCallback) -> None:
        self._error_callbacks.append(callback)

    def start(self, request: Request, outgoing: BodySource | None = None) -> None:
        if self._started:
            raise RuntimeError("Request already started on this reply")
        self._started = True
        if self._state is not ReplyState.OPEN or self._channel is None:
            return

        data = encode_request(request.verb, request.target, outgoing, version=self._version)
        self._logger.debug("%s %s bytes=%d", request.verb, request.target, len(data))
        try:
            self._channel.write(data)
            self._channel.flush()
        except OSError as exc:
            self.io_error = exc
            self._logger.error("Failed to send %s %s: %s", request.verb, request.target, exc)
            self._finish(ErrorCategory.PROTOCOL_FAILURE, f"Failed to send request: {exc}")

    def on_ready_read(self) -> None:
        if self._state is not ReplyState.OPEN or self._delivering or self._channel is None:
            return

        self._delivering = True
        try:
            try:
                while True:
                    chunk = self._channel.read(self._read_buffer_size)
                    if not chunk:
                        break
                    self._raw += chunk
                    self._logger.trace("Reply received bytes=%d total=%d", len(chunk), len(self._raw))
            except OSError as exc:
                self.io_error = exc
                self._logger.error("Failed to read reply: %s", exc)
                self._release_channel()
                self._finish(ErrorCategory.PROTOCOL_FAILURE, f"Failed to read reply: {exc}")
                return

            if not self._raw and not self._channel.at_eof:
                return

            parsed = parse_response(bytes(self._raw))
            self.status = parsed.status
            self.chunked_transfer_encoding = parsed.chunked_transfer_encoding
            self._content = parsed.body
            self._logger.debug(
                "Reply parsed status=%s chunked=%s body=%d",
                self.status_code,
                self.chunked_transfer_encoding,
                len(self._content),
            )
            self._finish(parsed.error, parsed.error_string)
        finally:
            self._delivering = False

    def abort(self) -> None:
        if self._state is not ReplyState.OPEN:
            return
        self._logger.info("Reply aborted")
        self._release_channel()
        self._finish(ErrorCategory.OPERATION_CANCELED, OPERATION_CANCELED, aborted=True)

    def read(self, max_bytes: int) -> bytes:
        """Return up to ``max_bytes`` of the body; ``b""`` means end of stream."""
        if max_bytes <= 0 or self._offset >= len(self._content):
            return b""
        end = min(self._offset + max_bytes, len(self._content))
        data = self._content[self._offset:end]
        self._offset = end
        return data

    def read_all(self) -> bytes:
        return self.read(self.bytes_available)

    def close(self) -> None:
        self._release_channel()

    def __enter__(self) -> "LocalSocketReply":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_channel", None) is not None:
            self._release_channel()

    def _release_channel(self) -> None:
        channel, self._channel = self._channel, None
        if channel is None:
            return
        channel.remove_ready_read_callback(self.on_ready_read)
        channel.close()

    def _finish(self, error: ErrorCategory | None, message: str, *, aborted: bool = False) -> None:
        if aborted:
            self._state = ReplyState.ABORTED
        elif error is None:
            self._state = ReplyState.FINISHED_SUCCESS
        else:
            self._state = ReplyState.FINISHED_ERROR

        if error is not None:
            self.error = error
            self.error_string = message
            self._logger.debug("Reply error %s: %s", error.value, message)
            for callback in list(self._error_callbacks):
                callback(error)

        for callback in list(self._finished_callbacks):
            callback()


__all__ = ["DEFAULT_READ_BUFFER_SIZE", "LocalSocketReply", "ReplyState"]
