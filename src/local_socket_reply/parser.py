"""Response parsing for the small HTTP dialect spoken over the local socket."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from .errors import ErrorCategory
from .status import error_from_http_status

MALFORMED_RESPONSE = "Malformed HTTP response from server"
TRUNCATED_RESPONSE = "Truncated HTTP response from server"

_STATUS_LINE = re.compile(r"HTTP/\d\.\d (?P<status>\d{3}) (?P<message>.*)", re.ASCII)


@dataclass
class ParsedStatus:
    code: int
    message: str


@dataclass
class ParsedResponse:
    status: ParsedStatus | None = None
    chunked_transfer_encoding: bool = False
    body: bytes = b""
    error: ErrorCategory | None = None
    error_string: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_status_line(line: bytes) -> ParsedStatus | None:
    if line.endswith(b"\r"):
        line = line[:-1]
    match = _STATUS_LINE.fullmatch(line.decode("latin-1"))
    if not match:
        return None
    return ParsedStatus(code=int(match.group("status")), message=match.group("message"))


def parse_response(raw: bytes) -> ParsedResponse:
    """Split ``raw`` into status, header flags and the first body line.

    Only the first chunk of a chunked body is returned: the chunk-size line
    right after the header separator is skipped and nothing after the body
    line is read.
    """
    result = ParsedResponse()
    lines = bytes(raw).split(b"\n")

    status = parse_status_line(lines[0])
    if status is None:
        result.error = ErrorCategory.PROTOCOL_FAILURE
        result.error_string = MALFORMED_RESPONSE
        return result

    result.status = status
    if status.code >= 400:
        result.error = error_from_http_status(status.code)
        result.error_string = status.message

    for index in range(1, len(lines)):
        line = lines[index]
        if b"Transfer-Encoding" in line and b"chunked" in line:
            result.chunked_transfer_encoding = True

        if not line or line.startswith(b"\r"):
            body_index = index + (2 if result.chunked_transfer_encoding else 1)
            if body_index < len(lines):
                result.body = lines[body_index].strip()
            return result

    # No header/body separator at all
    if result.error is None:
        result.error = ErrorCategory.PROTOCOL_FAILURE
        result.error_string = TRUNCATED_RESPONSE
    return result


def extract_error_message(body: str | None) -> str | None:
    """Pull the ``error`` field out of an LXD style error document."""
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return None

    if isinstance(parsed, dict) and parsed.get("error"):
        message = parsed["error"]
        if isinstance(message, str):
            return message
        return str(message)
    return None


__all__ = [
    "MALFORMED_RESPONSE",
    "TRUNCATED_RESPONSE",
    "ParsedResponse",
    "ParsedStatus",
    "extract_error_message",
    "parse_response",
    "parse_status_line",
]
