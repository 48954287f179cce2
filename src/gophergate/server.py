"""HTTP gateway serving Gopher resources as HTML."""

import asyncio
import contextlib
import socket
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import typer

from .assets import AssetError, AssetTable, content_type_for
from .core import GopherClient, GopherError, GopherFetcher
from .normalize import normalize
from .render import RenderedPage, error_html, needs_fetch, to_html
from .request import Request, resolve_path

# Kept low: the gateway is meant to be run locally by one user.
MAX_WORKERS = 10

REQUEST_BUFFER_SIZE = 512

STATUS_OK = "200 OK"
STATUS_NOT_FOUND = "404 Not Found"
STATUS_SERVER_ERROR = "500 Internal Server Error"

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
FALLBACK_CONTENT_TYPE = "text/plain; charset=utf-8"

ConnectionHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


@dataclass
class HttpResponse:
    """Status line, optional content headers and body."""

    status: str
    body: bytes = b""
    content_type: str | None = None

    def to_bytes(self) -> bytes:
        head = f"HTTP/1.1 {self.status}\r\n"
        if self.content_type is not None:
            head += f"content-type: {self.content_type}\r\n"
            head += f"content-length: {len(self.body)}\r\n"
        head += "\r\n"
        return head.encode("ascii") + self.body


def first_line(data: bytes) -> str | None:
    """First line of the request buffer, or None if there is none."""
    if not data:
        return None
    raw = data.split(b"\n", 1)[0].rstrip(b"\r")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def server_error() -> HttpResponse:
    """Minimal 500 response, used when no page can be rendered."""
    return HttpResponse(
        STATUS_SERVER_ERROR,
        STATUS_SERVER_ERROR.encode("ascii"),
        FALLBACK_CONTENT_TYPE,
    )


def _format_addr(addr) -> str:
    if isinstance(addr, tuple) and len(addr) >= 2:
        return f"{addr[0]}:{addr[1]}"
    return str(addr)


class WorkerPool:
    """A fixed number of worker tasks, each running one connection to completion.

    A connection holds one of ``size`` slots from before it is accepted
    until its handler returns, so a saturated pool stops the accept loop
    and further clients wait in the listener backlog.
    """

    def __init__(self, size: int = MAX_WORKERS):
        if size < 1:
            raise ValueError("Worker pool needs at least one worker")
        self.size = size
        self.in_flight = 0
        self._queue: asyncio.Queue[tuple[asyncio.StreamReader, asyncio.StreamWriter]] | None = None
        self._slots: asyncio.Semaphore | None = None
        self._workers: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def start(self, handler: ConnectionHandler):
        """Start the workers. Must be called from a running event loop."""
        if self.running:
            raise RuntimeError("Worker pool already started")
        self._queue = asyncio.Queue(maxsize=self.size)
        self._slots = asyncio.Semaphore(self.size)
        self._workers = [
            asyncio.create_task(self._worker(i, handler))
            for i in range(self.size)
        ]

    async def acquire(self):
        """Wait for a free slot."""
        if self._slots is None:
            raise RuntimeError("Worker pool is not running")
        await self._slots.acquire()
        self.in_flight += 1

    def dispatch(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Hand a connection to the next free worker. Requires an acquired slot."""
        self._queue.put_nowait((reader, writer))

    async def submit(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Wait for a slot, then dispatch the connection."""
        await self.acquire()
        self.dispatch(reader, writer)

    async def join(self):
        """Wait until every submitted connection has been handled."""
        if self._queue is not None:
            await self._queue.join()

    async def _worker(self, worker_id: int, handler: ConnectionHandler):
        """Worker coroutine that handles connections from the queue."""
        while True:
            reader, writer = await self._queue.get()
            try:
                await handler(reader, writer)
            except Exception as e:
                typer.echo(f"└ worker {worker_id}: {e!r}", err=True)
                writer.close()
            finally:
                self.in_flight -= 1
                self._slots.release()
                self._queue.task_done()

    async def close(self):
        """Cancel all workers and drop connections still waiting for one."""
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        if self._queue is not None:
            while not self._queue.empty():
                _, writer = self._queue.get_nowait()
                writer.close()
        self._workers = []
        self._queue = None
        self._slots = None
        self.in_flight = 0


class Gateway:
    """Accepts browser connections and answers each with one HTTP response."""

    def __init__(
        self,
        default_target: str,
        client: GopherFetcher | None = None,
        assets: AssetTable | None = None,
        workers: int = MAX_WORKERS,
        buffer_size: int = REQUEST_BUFFER_SIZE,
        title: str = "gophergate",
    ):
        self.default_target = default_target
        self.client = client if client is not None else GopherClient()
        self.assets = assets if assets is not None else AssetTable.from_package()
        self.pool = WorkerPool(workers)
        self.buffer_size = buffer_size
        self.title = title

    async def serve(self, listener: socket.socket):
        """Serve on an already bound listening socket until cancelled.

        A connection is only accepted once a worker slot is free; while the
        pool is saturated, clients wait in the listener backlog.
        """
        loop = asyncio.get_running_loop()
        listener.setblocking(False)
        self.pool.start(self.handle_connection)
        typer.echo(f"┌ Listening at http://{_format_addr(listener.getsockname())}")
        try:
            while True:
                await self.pool.acquire()
                conn, _ = await loop.sock_accept(listener)
                reader, writer = await asyncio.open_connection(sock=conn)
                self.pool.dispatch(reader, writer)
        finally:
            await self.pool.close()

    async def handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Read one request, write one response, close the connection."""
        peer = _format_addr(writer.get_extra_info("peername"))
        typer.echo(f"┌ Connection from {peer}")
        try:
            # A single bounded read; longer request lines are cut off
            data = await reader.read(self.buffer_size)
            line = first_line(data)
            if line is None:
                return

            typer.echo(f"│ {line}")
            req = Request(addr=peer)
            req.parse(line)
            try:
                response = await self.respond(req)
            except Exception as e:
                typer.echo(f"└ {STATUS_SERVER_ERROR}: {e!r}", err=True)
                response = server_error()
            writer.write(response.to_bytes())
            await writer.drain()
        except OSError as e:
            typer.echo(f"└ {peer}: {e}", err=True)
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    async def respond(self, req: Request) -> HttpResponse:
        """Build the response for a parsed request."""
        if not req.path:
            req.path = self.default_target

        if req.is_static_file(self.assets):
            return self.static_response(req)
        return await self.gopher_response(req)

    def static_response(self, req: Request) -> HttpResponse:
        """Serve a bundled asset verbatim."""
        name = req.asset_name
        data = self.assets.get(name)
        typer.echo(f"└ {STATUS_OK}: {name}")
        if data is None:
            return HttpResponse(STATUS_OK)
        return HttpResponse(STATUS_OK, data, content_type_for(name))

    async def gopher_response(self, req: Request) -> HttpResponse:
        """Normalize, fetch and render a Gopher resource as a full page."""
        target = resolve_path(req.path) or self.default_target
        locator = normalize(target)

        try:
            layout = self.assets.layout()
        except AssetError as e:
            typer.echo(f"└ {STATUS_SERVER_ERROR}: {e}", err=True)
            return server_error()

        status = STATUS_OK
        try:
            response = await self.client.fetch(locator) if needs_fetch(locator) else None
            content = to_html(locator, response)
            typer.echo(f"└ {STATUS_OK}: {req.short_path}")
        except GopherError as e:
            status = STATUS_NOT_FOUND
            content = error_html(str(e))
            typer.echo(f"├ {STATUS_NOT_FOUND}: {req.short_path}")
            typer.echo(f"└ {e}", err=True)

        page = RenderedPage(content=content, url=str(locator), title=self.title)
        return HttpResponse(status, page.assemble(layout).encode("utf-8"), HTML_CONTENT_TYPE)


def bind(host: str, port: int, backlog: int = 128) -> socket.socket:
    """Bind the listening socket. Raises OSError if the address is unavailable."""
    return socket.create_server((host, port), backlog=backlog)


async def start(
    listener: socket.socket,
    default_target: str,
    client: GopherFetcher | None = None,
    workers: int = MAX_WORKERS,
    buffer_size: int = REQUEST_BUFFER_SIZE,
    title: str = "gophergate",
):
    """Serve on ``listener`` forever, one response per accepted connection."""
    gateway = Gateway(
        default_target,
        client=client,
        workers=workers,
        buffer_size=buffer_size,
        title=title,
    )
    await gateway.serve(listener)
