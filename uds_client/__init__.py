"""
Unix domain socket client

A small asyncio client that connects to a Unix domain socket, exchanges raw
bytes with the peer and reports its lifecycle through explicit states,
errors and notifications.
"""

__version__ = "1.0.0"
__description__ = "Asyncio client for Unix domain stream sockets"

# Public API exports
from .config import Config
from .core import ConnectionState, ConnectionEvent
from .core.exceptions import ClientException, InvalidStateError
from .socket import (
    SocketClient,
    SocketClientOptions,
    SocketConnectError,
    SocketSendError,
    SocketReceiveError,
    SocketTimeoutError,
    ConnectionClosedError,
)

__all__ = [
    "Config",
    "ConnectionState",
    "ConnectionEvent",
    "ClientException",
    "InvalidStateError",
    "SocketClient",
    "SocketClientOptions",
    "SocketConnectError",
    "SocketSendError",
    "SocketReceiveError",
    "SocketTimeoutError",
    "ConnectionClosedError",
]
