"""
Socket communication module for the Unix domain socket client.

Provides the SocketClient and socket-specific exception handling.
"""

from .socket_client import SocketClient, SocketClientOptions
from .exceptions import (
    ConnectFailureReason,
    SocketConnectError,
    SocketTimeoutError,
    SocketSendError,
    SocketReceiveError,
    ConnectionClosedError,
)

__all__ = [
    "SocketClient",
    "SocketClientOptions",
    "ConnectFailureReason",
    "SocketConnectError",
    "SocketTimeoutError",
    "SocketSendError",
    "SocketReceiveError",
    "ConnectionClosedError",
]
