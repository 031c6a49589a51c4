"""
Connection lifecycle states and notification names.
"""

from enum import Enum


class ConnectionState(Enum):
    """Lifecycle of a single client connection. CLOSED is terminal."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class ConnectionEvent(Enum):
    """Lifecycle notifications a listener can subscribe to."""

    CONNECTED = "connected"
    DATA = "data"
    ERROR = "error"
    CLOSED = "closed"
