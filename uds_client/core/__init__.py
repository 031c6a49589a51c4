"""
Core client functionality.

Contains connection lifecycle states and core exceptions.
"""

from .state import ConnectionState, ConnectionEvent
from .exceptions import (
    ClientException,
    ClientErrorCode,
    InvalidStateError,
)

__all__ = [
    "ConnectionState",
    "ConnectionEvent",
    "ClientException",
    "ClientErrorCode",
    "InvalidStateError",
]
