import asyncio
import os
import shutil
import tempfile
from contextlib import suppress

import pytest
import pytest_asyncio


@pytest.fixture
def socket_path():
    # AF_UNIX paths are limited to ~108 bytes, so stay out of pytest's tmp_path.
    directory = tempfile.mkdtemp(prefix="uds-", dir="/tmp")
    yield os.path.join(directory, "sock")
    shutil.rmtree(directory, ignore_errors=True)


@pytest_asyncio.fixture
async def unix_server(socket_path):
    """Factory starting an asyncio Unix server on socket_path with the given handler."""
    servers = []

    async def start(handler):
        server = await asyncio.start_unix_server(handler, path=socket_path)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.close()
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(server.wait_closed(), timeout=1.0)


async def echo_handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    while True:
        data = await reader.read(1024)
        if not data:
            break
        writer.write(data)
        await writer.drain()
    writer.close()


async def drain_handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Read until the client goes away, never answer."""
    while await reader.read(1024):
        pass
    writer.close()


@pytest.fixture
def echo():
    return echo_handler


@pytest.fixture
def silent():
    return drain_handler
