"""Public surface for the local socket HTTP client."""

from .channel import Channel, UnixSocketChannel
from .client import ClientOptions, LocalSocketClient
from .errors import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    ConnectionError,
    ContentError,
    ErrorCategory,
    InvalidOperationError,
    LocalSocketError,
    NotFoundError,
    OperationCanceledError,
    ProtocolError,
    ServerError,
    UnknownServerError,
)
from .parser import ParsedResponse, ParsedStatus, parse_response
from .reply import LocalSocketReply, ReplyState
from .request import BytesBody, Request, StreamBody, encode_request
from .status import error_from_http_status
from .transport import LocalSocketTransport
from .types import ExecuteResult
from .version import __version__

__all__ = [
    "__version__",
    "AccessDeniedError",
    "AuthenticationError",
    "BytesBody",
    "Channel",
    "ClientOptions",
    "ConflictError",
    "ConnectionError",
    "ContentError",
    "ErrorCategory",
    "ExecuteResult",
    "InvalidOperationError",
    "LocalSocketClient",
    "LocalSocketError",
    "LocalSocketReply",
    "LocalSocketTransport",
    "NotFoundError",
    "OperationCanceledError",
    "ParsedResponse",
    "ParsedStatus",
    "ProtocolError",
    "ReplyState",
    "Request",
    "ServerError",
    "StreamBody",
    "UnixSocketChannel",
    "UnknownServerError",
    "encode_request",
    "error_from_http_status",
    "parse_response",
]
