"""
Main entry point for the Unix socket greeter.

Connects to the configured socket, sends the greeting, logs the first
response and disconnects. Handles graceful shutdown on SIGINT/SIGTERM.
"""

import asyncio
import signal
import sys
import logging
from typing import Optional, List

from uds_client.config import Config
from uds_client.core import ConnectionEvent
from uds_client.core.exceptions import ClientException
from uds_client.socket import SocketClient, SocketClientOptions


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class GreeterApp:
    """Greeter application: one connection, one greeting, one response."""

    def __init__(self, config: Config, handle_signals: bool = True) -> None:
        self.config = config
        self.handle_signals = handle_signals
        self.socket_client: Optional[SocketClient] = None
        self.response: Optional[bytes] = None
        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start the greeter and wait until the connection is closed."""
        try:
            logger.info('Starting greeter client')
            logger.info(f'  - Socket Path: {self.config.socket_path}')

            # Data is consumed by listeners only, nothing to queue for receive()
            options = SocketClientOptions.from_config(self.config, buffer_chunks=False)
            self.socket_client = SocketClient(options)
            self.socket_client.on(ConnectionEvent.CONNECTED, self._on_connected)
            self.socket_client.on(ConnectionEvent.DATA, self._on_data)
            self.socket_client.on(ConnectionEvent.ERROR, self._on_error)
            self.socket_client.on(ConnectionEvent.CLOSED, self._on_closed)

            if self.handle_signals:
                self._setup_signal_handlers()

            await self.socket_client.connect()

            # Keep running until the connection is closed or a signal arrives
            await self._shutdown_event.wait()

            await self.shutdown()

        except ClientException as error:
            logger.error(f'Failed to start client: {error}')
            sys.exit(1)

    async def shutdown(self) -> None:
        """Close the connection gracefully."""
        try:
            if self.socket_client:
                await asyncio.wait_for(
                    self.socket_client.close(),
                    timeout=10.0  # 10 second timeout
                )
        except asyncio.TimeoutError:
            logger.error('Shutdown timeout exceeded')
            sys.exit(1)

    async def _on_connected(self) -> None:
        logger.info('Connected')
        await self.socket_client.send(self.config.greeting.encode('utf-8'))

    async def _on_data(self, chunk: bytes) -> None:
        if self.response is not None:
            return
        self.response = chunk
        logger.info('Received: ' + chunk.decode('utf-8', errors='replace'))
        await self.socket_client.close()

    def _on_error(self, error: ClientException) -> None:
        logger.error(f'Connection error: {error}')

    def _on_closed(self) -> None:
        logger.info('Connection closed')
        self._shutdown_event.set()

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        def signal_handler() -> None:
            logger.info('Received shutdown signal')
            self._shutdown_event.set()

        loop.add_signal_handler(signal.SIGINT, signal_handler)
        loop.add_signal_handler(signal.SIGTERM, signal_handler)


def load_config(argv: List[str]) -> Config:
    """Load configuration from the JSON file named by the first argument, if any."""
    if len(argv) > 1:
        return Config.from_file(argv[1])
    return Config()


async def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the greeter."""
    config = load_config(sys.argv if argv is None else argv)
    logging.getLogger().setLevel(config.log_level.upper())

    app = GreeterApp(config)
    await app.start()


def run() -> None:
    """Run the main application with asyncio."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info('Greeter interrupted by user')
    except ValueError as error:
        logger.error(f'Invalid configuration: {error}')
        sys.exit(1)


if __name__ == '__main__':
    run()
