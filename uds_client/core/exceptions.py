"""
Core client exceptions.

Provides the base exception, standardized error codes and lifecycle errors.
"""

from typing import Union

from .state import ConnectionState

DEFAULT_MODULE = "client"


class ClientErrorCode:
    """Error code constants for client errors."""

    INVALID_STATE = 1
    INVALID_ENDPOINT = 2
    CONNECT_FAILED = 3
    TIMEOUT = 4
    SEND_FAILED = 5
    RECEIVE_FAILED = 6
    CONNECTION_CLOSED = 7


class ClientException(Exception):
    """
    Base exception for all client errors.

    Carries a numeric code and the name of the module that raised it so
    callers can decide whether to log, retry or abort.
    """

    def __init__(self, message: str, code: int = 1, module: str = DEFAULT_MODULE):
        super().__init__(message)
        self.code = code
        self.module = module
        self.msg = message


class InvalidStateError(ClientException):
    """Operation attempted in a state that does not permit it."""

    def __init__(self, operation: str, state: Union[ConnectionState, str]):
        state_name = state.value if isinstance(state, ConnectionState) else state
        message = f"Cannot {operation} while {state_name}"
        super().__init__(message, code=ClientErrorCode.INVALID_STATE)
        self.operation = operation
        self.state = state
