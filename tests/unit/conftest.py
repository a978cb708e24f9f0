import asyncio

import pytest
import pytest_asyncio

from statsd_console.infrastructure.tcp.server import ConsoleServer
from statsd_console.metrics.aggregator import MetricAggregator

PROMPT = "console> "
IO_TIMEOUT = 5


class ConsoleClient:
    """Minimal line client speaking the console protocol over loopback."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer

    async def read_prompt(self) -> str:
        data = await asyncio.wait_for(
            self.reader.readuntil(PROMPT.encode()), IO_TIMEOUT
        )
        return data[: -len(PROMPT)].decode()

    async def send(self, line: str) -> None:
        self.writer.write(line.encode() + b"\n")
        await self.writer.drain()

    async def command(self, line: str) -> str:
        """Send one line and return the response preceding the next prompt."""
        await self.send(line)
        return await self.read_prompt()

    async def read_to_eof(self) -> str:
        data = await asyncio.wait_for(self.reader.read(), IO_TIMEOUT)
        return data.decode()

    async def close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError:
            pass


@pytest.fixture
def aggregator():
    return MetricAggregator()


@pytest_asyncio.fixture
async def console(aggregator):
    """Console server on an ephemeral loopback port."""
    server = ConsoleServer(aggregator, addr="127.0.0.1:0", prompt=PROMPT)
    task = asyncio.create_task(server.listen_and_serve())
    await asyncio.wait_for(server.ready.wait(), IO_TIMEOUT)
    yield server
    server.close()
    await task
    await server.wait_closed()


@pytest_asyncio.fixture
async def connect(console):
    """Factory opening clients against the running console (prompt consumed)."""
    clients = []

    async def _connect() -> ConsoleClient:
        host, port = console.address[:2]
        reader, writer = await asyncio.open_connection(host, port)
        client = ConsoleClient(reader, writer)
        clients.append(client)
        await client.read_prompt()
        return client

    yield _connect
    for client in clients:
        await client.close()
