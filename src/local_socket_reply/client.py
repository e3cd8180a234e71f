"""High-level client for a daemon speaking HTTP over a Unix socket."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import (
    ConnectionError,
    LocalSocketError,
    OperationCanceledError,
    ProtocolError,
    exception_for,
)
from .logger import BoundLogger, LogLevel, create_logger
from .parser import extract_error_message
from .status import error_from_http_status
from .transport import LocalSocketTransport
from .types import ExecuteResult

DEFAULT_SOCKET_PATH = "/var/snap/lxd/common/lxd/unix.socket"
BASE_URL = "http://multipass"


@dataclass
class ClientOptions:
    socket_path: str = DEFAULT_SOCKET_PATH
    read_timeout: float = 60.0
    connect_timeout: float = 5.0
    transport: httpx.BaseTransport | None = None
    logger: object | None = None
    log_level: LogLevel | None = None


class LocalSocketClient:
    """Primary entry point for talking to the daemon."""

    def __init__(
        self,
        *,
        socket_path: str = DEFAULT_SOCKET_PATH,
        read_timeout: float = 60.0,
        connect_timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
        logger: object | None = None,
        log_level: LogLevel | None = None,
    ) -> None:
        options = ClientOptions(
            socket_path=socket_path,
            read_timeout=read_timeout,
            connect_timeout=connect_timeout,
            transport=transport,
            logger=logger,
            log_level=log_level,
        )
        self.socket_path = options.socket_path
        self._read_timeout = options.read_timeout
        base_logger = create_logger(logger=options.logger, level=options.log_level)
        self._logger = base_logger.child("client")
        self._logger.info("Initializing LocalSocketClient for %s", self.socket_path)
        self._transport = options.transport or LocalSocketTransport(
            options.socket_path,
            read_timeout=options.read_timeout,
            connect_timeout=options.connect_timeout,
            logger=base_logger,
        )
        self._client = httpx.Client(transport=self._transport, base_url=BASE_URL)

    def request(self, verb: str, path: str, body: bytes | str | None = None) -> bytes:
        result = self.request_safe(verb, path, body)
        if not result.ok:
            raise result.error or LocalSocketError("Request failed")
        return result.data or b""

    def request_safe(self, verb: str, path: str, body: bytes | str | None = None) -> ExecuteResult[bytes]:
        try:
            data = self._request_internal(verb, path, body)
            return ExecuteResult(ok=True, data=data)
        except Exception as exc:
            return ExecuteResult(ok=False, error=exc)

    def request_json(self, verb: str, path: str, body: bytes | str | None = None) -> Any:
        data = self.request(verb, path, body)
        if not data:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"Invalid JSON response: {exc}", context=data) from exc

    def get(self, path: str) -> bytes:
        return self.request("GET", path)

    def post(self, path: str, body: bytes | str | None = None) -> bytes:
        return self.request("POST", path, body)

    def put(self, path: str, body: bytes | str | None = None) -> bytes:
        return self.request("PUT", path, body)

    def delete(self, path: str) -> bytes:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LocalSocketClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request_internal(self, verb: str, path: str, body: bytes | str | None) -> bytes:
        try:
            response = self._client.request(verb.upper(), path, content=body)
        except httpx.TimeoutException as exc:
            raise OperationCanceledError(
                f"Request timeout after {self._read_timeout}s", context=path
            ) from exc
        except httpx.RemoteProtocolError as exc:
            raise ProtocolError(str(exc), context=path) from exc
        except httpx.RequestError as exc:
            raise ConnectionError(f"Cannot reach {self.socket_path}: {exc}", context=path) from exc
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> bytes:
        status = response.status_code
        body = response.content
        if status < 400:
            return body

        category = error_from_http_status(status)
        message = extract_error_message(body.decode("utf-8", errors="replace")) or response.reason_phrase
        self._logger.debug("Request failed status=%d category=%s", status, category.value)
        raise exception_for(category)(message, context=status)


__all__ = ["ClientOptions", "DEFAULT_SOCKET_PATH", "LocalSocketClient"]
