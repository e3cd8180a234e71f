"""Logging wrapper shared by the channel, reply, transport and client."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Literal, Protocol

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

LOGGER_NAME = "local_socket_reply"
LOG_LEVEL_ENV = "LOCAL_SOCKET_REPLY_LOG"

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

LOG_LEVEL_PRIORITY: dict[LogLevel, int] = {
    "trace": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
}

_STDLIB_LEVELS: dict[LogLevel, int] = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class LoggerProtocol(Protocol):
    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


class BoundLogger:
    """Filters records by level before handing them to the wrapped logger."""

    def __init__(self, logger: Any | None = None, *, level: LogLevel = "info") -> None:
        self._logger = logger or _default_logger()
        self._level = level

    @property
    def level(self) -> LogLevel:
        return self._level

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("trace", msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("debug", msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("info", msg, *args, **kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("warn", msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit("error", msg, *args, **kwargs)

    def child(self, name: str) -> "BoundLogger":
        """Create a child logger (``local_socket_reply.<name>``) at the same level."""
        if isinstance(self._logger, logging.Logger):
            base = self._logger.getChild(name)
        else:
            base = self._logger
        return BoundLogger(base, level=self._level)

    def _emit(self, level: LogLevel, msg: str, *args: Any, **kwargs: Any) -> None:
        if LOG_LEVEL_PRIORITY[level] < LOG_LEVEL_PRIORITY[self._level]:
            return
        try:
            if hasattr(self._logger, "log"):
                self._logger.log(_STDLIB_LEVELS[level], msg, *args, **kwargs)
                return

            # duck-typed loggers without log()
            handler: Callable[..., Any] | None = getattr(self._logger, level, None)
            if handler:
                handler(msg, *args, **kwargs)
        except Exception:
            # Never let logging failures bubble up into client code
            pass


def _default_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(TRACE_LEVEL)
    return logger


def level_from_env(default: LogLevel = "info") -> LogLevel:
    value = os.getenv(LOG_LEVEL_ENV, "").strip().lower()
    if value in LOG_LEVEL_PRIORITY:
        return value  # type: ignore[return-value]
    return default


def create_logger(*, logger: Any | None = None, level: LogLevel | None = None) -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level or level_from_env())


__all__ = ["BoundLogger", "LogLevel", "LoggerProtocol", "create_logger", "level_from_env"]
