"""
Socket communication exceptions for the Unix domain socket client.

Provides socket-specific error handling for connect, send and receive operations.
"""

from enum import Enum
from typing import Optional

from ..core.exceptions import ClientException, ClientErrorCode


class ConnectFailureReason(Enum):
    """Why a connection attempt was rejected."""

    INVALID_ENDPOINT = "invalid endpoint"
    NOT_FOUND = "socket file not found"
    PERMISSION_DENIED = "permission denied"
    REFUSED = "connection refused"
    TIMEOUT = "timed out"
    OTHER = "connection failed"


class SocketConnectError(ClientException):
    """Connection attempt failed."""

    def __init__(
        self,
        socket_path: str,
        reason: ConnectFailureReason = ConnectFailureReason.OTHER,
        detail: Optional[str] = None,
    ):
        message = f"Cannot connect to {socket_path!r}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        code = (
            ClientErrorCode.INVALID_ENDPOINT
            if reason is ConnectFailureReason.INVALID_ENDPOINT
            else ClientErrorCode.CONNECT_FAILED
        )
        super().__init__(message, code=code, module="socket")
        self.socket_path = socket_path
        self.reason = reason


class SocketTimeoutError(ClientException):
    """Socket operation timeout error."""

    def __init__(self, operation: str = "request", timeout: Optional[float] = None):
        if timeout:
            message = f"{operation} timed out after {timeout}s"
        else:
            message = f"{operation} timed out"
        super().__init__(message, code=ClientErrorCode.TIMEOUT, module="socket")


class SocketSendError(ClientException):
    """Writing to the connection failed."""

    def __init__(self, detail: str = "write failed"):
        super().__init__(
            f"send() failed with err: {detail}",
            code=ClientErrorCode.SEND_FAILED,
            module="socket",
        )


class SocketReceiveError(ClientException):
    """Reading from the connection failed."""

    def __init__(self, detail: str = "read failed"):
        super().__init__(
            f"receive() failed with err: {detail}",
            code=ClientErrorCode.RECEIVE_FAILED,
            module="socket",
        )


class ConnectionClosedError(ClientException):
    """The connection is closed and no buffered data remains."""

    def __init__(self, socket_path: Optional[str] = None):
        if socket_path:
            message = f"Connection to {socket_path!r} is closed"
        else:
            message = "Connection is closed"
        super().__init__(
            message, code=ClientErrorCode.CONNECTION_CLOSED, module="socket"
        )
