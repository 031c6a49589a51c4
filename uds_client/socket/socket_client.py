"""
Unix socket client that exchanges raw bytes with a peer over a stream connection.

Provides async connect/send/receive/close with lifecycle notifications. The peer
is treated as an opaque byte stream: chunks are delivered as the transport
hands them over, with no framing applied.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Optional, Dict, List, Any, AsyncIterator, Callable, Union

from ..config import Config
from ..core import ConnectionState, ConnectionEvent
from ..core.exceptions import (
    ClientException,
    ClientErrorCode,
    InvalidStateError,
)
from .exceptions import (
    ConnectFailureReason,
    ConnectionClosedError,
    SocketConnectError,
    SocketReceiveError,
    SocketSendError,
    SocketTimeoutError,
)

Listener = Callable[..., Any]

# Terminates the received chunk sequence.
_EOF = object()


@dataclass
class SocketClientOptions:
    """Socket client configuration options."""

    socket_path: str = "/tmp/socket_file"
    connection_timeout: float = 5.0
    write_timeout: float = 10.0
    read_chunk_size: int = 65536
    buffer_chunks: bool = True

    def __post_init__(self) -> None:
        """Validate options after initialization."""
        for name in ("connection_timeout", "write_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"Invalid {name}: {value}. Must be a positive number.")

        if (
            isinstance(self.read_chunk_size, bool)
            or not isinstance(self.read_chunk_size, int)
            or self.read_chunk_size < 1
        ):
            raise ValueError(
                f"Invalid read_chunk_size: {self.read_chunk_size}. Must be a positive integer."
            )

    @classmethod
    def from_config(
        cls, config: Config, buffer_chunks: bool = True
    ) -> "SocketClientOptions":
        """
        Build client options from application configuration.

        Pass buffer_chunks=False when data is consumed only through listeners,
        otherwise every received chunk is also kept for receive().
        """
        return cls(
            socket_path=config.socket_path,
            connection_timeout=config.connection_timeout,
            write_timeout=config.write_timeout,
            read_chunk_size=config.read_chunk_size,
            buffer_chunks=buffer_chunks,
        )


class SocketClient:
    """
    Unix socket client owning a single connection lifecycle.

    DISCONNECTED -> CONNECTING -> CONNECTED -> CLOSED. A failed connect
    returns to DISCONNECTED; CLOSED is terminal for the instance.

    Received bytes can be consumed by awaiting receive(), by iterating the
    client with ``async for``, or by registering ``data`` listeners with on().
    """

    def __init__(self, options: Optional[SocketClientOptions] = None):
        """Initialize socket client with configuration."""
        if options is None:
            options = SocketClientOptions()

        self.logger = logging.getLogger("SocketClient")
        self._socket_path = options.socket_path
        self.connection_timeout = options.connection_timeout
        self.write_timeout = options.write_timeout
        self.read_chunk_size = options.read_chunk_size
        self._buffer_chunks = options.buffer_chunks

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._listen_task: Optional[asyncio.Task] = None
        self._reading = False
        self._chunks: asyncio.Queue = asyncio.Queue()
        self._closed = asyncio.Event()
        self._listeners: Dict[ConnectionEvent, List[Listener]] = {
            event: [] for event in ConnectionEvent
        }

        self._state = ConnectionState.DISCONNECTED

    def __repr__(self) -> str:
        return f"SocketClient(socket_path={self._socket_path!r}, state={self._state.value})"

    @property
    def socket_path(self) -> str:
        return self._socket_path

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def on(self, event: Union[ConnectionEvent, str], callback: Listener) -> None:
        """
        Register a lifecycle listener.

        Args:
            event: ConnectionEvent or its name ("connected", "data", "error", "closed")
            callback: Plain function or coroutine function. ``data`` listeners
                receive the chunk, ``error`` listeners the exception, the others
                no arguments.
        """
        self._listeners[ConnectionEvent(event)].append(callback)

    def off(self, event: Union[ConnectionEvent, str], callback: Listener) -> None:
        """Remove a previously registered listener, if present."""
        listeners = self._listeners[ConnectionEvent(event)]
        if callback in listeners:
            listeners.remove(callback)

    async def __aenter__(self) -> "SocketClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.chunks()

    async def connect(self) -> None:
        """
        Open the stream connection to the configured socket path.

        No retry is performed; on failure the client is left DISCONNECTED.

        Raises:
            InvalidStateError: If the client is not DISCONNECTED
            SocketConnectError: If the endpoint is empty or the connection is rejected
        """
        if self._state is not ConnectionState.DISCONNECTED:
            raise InvalidStateError("connect", self._state)

        if not isinstance(self._socket_path, str) or not self._socket_path.strip():
            raise SocketConnectError(
                str(self._socket_path), ConnectFailureReason.INVALID_ENDPOINT
            )

        self._state = ConnectionState.CONNECTING
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_unix_connection(self._socket_path),
                timeout=self.connection_timeout,
            )
        except (OSError, asyncio.TimeoutError) as err:
            self._reset_after_failed_connect()
            error = self._connect_error(err)
            self.logger.warning(f"Error connecting to socket: {error}")
            raise error from err
        except asyncio.CancelledError:
            self._reset_after_failed_connect()
            raise

        if self._state is not ConnectionState.CONNECTING:
            # close() ran while the connection was being opened
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as err:
                self.logger.debug(f"Error while closing transport: {err}")
            raise ConnectionClosedError(self._socket_path)

        self._reader, self._writer = reader, writer
        self._state = ConnectionState.CONNECTED
        self.logger.info(f"Connection established to {self._socket_path}")

        self._listen_task = asyncio.create_task(self._listen_for_data(reader))
        await self._emit(ConnectionEvent.CONNECTED)

    async def send(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """
        Write bytes to the connection and wait until they are handed to the transport.

        A failed write closes the client before the error is raised.

        Raises:
            InvalidStateError: If the client is not CONNECTED
            SocketSendError: If the underlying write fails (e.g. broken pipe)
            SocketTimeoutError: If the write does not drain within write_timeout
        """
        if self._state is not ConnectionState.CONNECTED or self._writer is None:
            raise InvalidStateError("send", self._state)

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ValueError(f"send() expects bytes, got {type(data).__name__}")

        writer = self._writer
        try:
            writer.write(data)
            await asyncio.wait_for(writer.drain(), timeout=self.write_timeout)
        except asyncio.TimeoutError as err:
            self.logger.error("Message send timeout - connection may be blocked")
            error: ClientException = SocketTimeoutError("send", self.write_timeout)
            error.__cause__ = err
            await self._shutdown(error)
            raise error from err
        except (ConnectionError, OSError) as err:
            error = SocketSendError(str(err) or type(err).__name__)
            error.__cause__ = err
            await self._shutdown(error)
            raise error from err

    async def receive(self) -> bytes:
        """
        Return the next received chunk, waiting until one arrives.

        Chunks read before the connection closed remain available afterwards.

        Raises:
            InvalidStateError: If called before the client connected
            SocketReceiveError: Once, if the connection ended with a read error
            ConnectionClosedError: When the connection is closed and drained
        """
        if self._state in (ConnectionState.DISCONNECTED, ConnectionState.CONNECTING):
            raise InvalidStateError("receive", self._state)

        if not self._buffer_chunks:
            raise ClientException(
                "receive() is unavailable when buffer_chunks is disabled",
                code=ClientErrorCode.INVALID_STATE,
                module="socket",
            )

        item = await self._chunks.get()
        if item is _EOF:
            # keep the sequence terminated for every later caller
            self._chunks.put_nowait(_EOF)
            raise ConnectionClosedError(self._socket_path)
        if isinstance(item, ClientException):
            raise item
        return item

    async def chunks(self) -> AsyncIterator[bytes]:
        """Yield received chunks in arrival order until the connection closes."""
        while True:
            try:
                chunk = await self.receive()
            except ConnectionClosedError:
                return
            yield chunk

    async def close(self) -> None:
        """
        Close the connection. Idempotent.

        The ``closed`` notification fires exactly once, after every ``data``
        notification for bytes already read. A pending receive() is woken
        with ConnectionClosedError.
        """
        if self._state is ConnectionState.CLOSED:
            await self._closed.wait()
            return

        await self._shutdown()

    async def wait_closed(self) -> None:
        """Wait until the client has reached CLOSED."""
        await self._closed.wait()

    def _reset_after_failed_connect(self) -> None:
        if self._state is ConnectionState.CONNECTING:
            self._state = ConnectionState.DISCONNECTED

    def _connect_error(self, err: BaseException) -> SocketConnectError:
        """Map a transport error raised while connecting to a SocketConnectError."""
        if isinstance(err, asyncio.TimeoutError):
            return SocketConnectError(
                self._socket_path,
                ConnectFailureReason.TIMEOUT,
                f"no answer after {self.connection_timeout}s",
            )
        if isinstance(err, FileNotFoundError):
            reason = ConnectFailureReason.NOT_FOUND
        elif isinstance(err, PermissionError):
            reason = ConnectFailureReason.PERMISSION_DENIED
        elif isinstance(err, ConnectionRefusedError):
            reason = ConnectFailureReason.REFUSED
        else:
            reason = ConnectFailureReason.OTHER
        return SocketConnectError(self._socket_path, reason, str(err))

    async def _listen_for_data(self, reader: asyncio.StreamReader) -> None:
        """Read chunks from the peer until EOF, a read error or close()."""
        error: Optional[ClientException] = None
        try:
            while self._state is ConnectionState.CONNECTED:
                self._reading = True
                try:
                    chunk = await reader.read(self.read_chunk_size)
                finally:
                    self._reading = False
                if not chunk:
                    self.logger.info("Connection closed by peer")
                    break

                if self._buffer_chunks:
                    self._chunks.put_nowait(chunk)
                await self._emit(ConnectionEvent.DATA, chunk)

        except asyncio.CancelledError:
            self.logger.debug("Receive loop cancelled")
            raise
        except (ConnectionError, OSError) as err:
            self.logger.error(f"Error reading from socket: {err}")
            error = SocketReceiveError(str(err) or type(err).__name__)
            error.__cause__ = err
            if self._buffer_chunks:
                self._chunks.put_nowait(error)

        await self._shutdown(error)

    async def _shutdown(self, error: Optional[ClientException] = None) -> None:
        """Release the transport, move to CLOSED and notify listeners once."""
        if self._state is ConnectionState.CLOSED:
            return

        was_connected = self._state is ConnectionState.CONNECTED
        self._state = ConnectionState.CLOSED

        # Stop the receive loop unless it is the caller (close() from a data listener).
        # Only a pending read is cancelled; a running data notification completes
        # and the loop then exits on the CLOSED state.
        task = self._listen_task
        if task and not task.done() and task is not asyncio.current_task():
            if self._reading:
                task.cancel()
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                pass

        writer = self._writer
        self._reader = None
        self._writer = None
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as err:
                self.logger.debug(f"Error while closing transport: {err}")

        self._chunks.put_nowait(_EOF)
        self._closed.set()

        if error is not None:
            await self._emit(ConnectionEvent.ERROR, error)

        if was_connected:
            self.logger.info(f"Connection to {self._socket_path} closed")
        await self._emit(ConnectionEvent.CLOSED)

    async def _emit(self, event: ConnectionEvent, *args: Any) -> None:
        """Invoke listeners for an event in registration order."""
        for callback in list(self._listeners[event]):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as err:
                self.logger.error(f"Error in {event.value} listener: {err}")
