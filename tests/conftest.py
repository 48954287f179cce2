"""Shared fixtures: an in-process Gopher server and a running gateway."""

import asyncio
import contextlib
from dataclasses import dataclass, field

import pytest

from gophergate.server import Gateway, bind

NOT_FOUND_MENU = b"3Not found\t\terror.host\t1\r\n.\r\n"


@dataclass
class LocalGopher:
    """Address of a test Gopher server plus the selectors it received."""

    host: str
    port: int
    requests: list[str] = field(default_factory=list)

    def url(self, path: str = "") -> str:
        return f"{self.host}:{self.port}{path}"


@pytest.fixture
async def gopher_server():
    """Gopher server answering from a fixed selector table."""
    routes = {
        "": b"iWelcome\t\terror.host\t1\r\n1Docs\t/docs\tlocalhost\t70\r\n.\r\n",
        "/readme.txt": b"Hello \x1b[1mgopher\x1b[0m\r\n.\r\n",
        "/search\tcats": b"0Cats\t/cats.txt\tlocalhost\t70\r\n.\r\n",
    }
    state = LocalGopher(host="127.0.0.1", port=0)

    async def handle(reader, writer):
        line = (await reader.readline()).decode("utf-8").rstrip("\r\n")
        state.requests.append(line)
        writer.write(routes.get(line, NOT_FOUND_MENU))
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    state.port = server.sockets[0].getsockname()[1]
    yield state
    server.close()
    await server.wait_closed()


@pytest.fixture
async def silent_gopher_server():
    """Gopher server that accepts a request and never answers."""

    async def handle(reader, writer):
        await reader.read()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    yield LocalGopher(host="127.0.0.1", port=server.sockets[0].getsockname()[1])
    server.close()
    await server.wait_closed()


@pytest.fixture
async def serve_gateway():
    """Start a gateway on an ephemeral port; returns its base URL."""
    running = []

    async def _serve(gateway: Gateway) -> str:
        listener = bind("127.0.0.1", 0)
        host, port = listener.getsockname()[:2]
        task = asyncio.create_task(gateway.serve(listener))
        running.append((task, listener))
        await asyncio.sleep(0.01)
        return f"http://{host}:{port}"

    yield _serve

    for task, listener in running:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        listener.close()
