"""Channel implementations exposed to users."""

from .base import Channel, ReadyReadCallback
from .unix import UnixSocketChannel

__all__ = [
    "Channel",
    "ReadyReadCallback",
    "UnixSocketChannel",
]
