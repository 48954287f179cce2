"""Gopher client implementation using asyncio streams."""

import asyncio

from .gopher import ItemType, Locator
from .protocols import GopherError, GopherResponse

DEFAULT_TIMEOUT = 15.0
READ_CHUNK_SIZE = 4096
MAX_PORT = 65535

# Would split or retype the request line
FORBIDDEN_CHARS = "\r\n\t"


class GopherClient:
    """Async Gopher client, one TCP connection per fetch."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    async def fetch(self, locator: Locator) -> GopherResponse:
        """Fetch a locator and return the response."""
        if not locator.item_type.is_proxyable:
            raise GopherError(f"Can't fetch {locator.item_type.css_class} items: {locator}")
        if not locator.host:
            raise GopherError(f"No host in {locator}")
        if not 0 < locator.port <= MAX_PORT:
            raise GopherError(f"Invalid port {locator.port} in {locator}")
        for part in (locator.selector, locator.query or ""):
            if any(char in part for char in FORBIDDEN_CHARS):
                raise GopherError(f"Control characters in selector: {part!r}")

        request = locator.selector
        if locator.query is not None:
            request = f"{request}\t{locator.query}"

        try:
            body = await asyncio.wait_for(
                self._request(locator.host, locator.port, request),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise GopherError(
                f"Timed out after {self.timeout:g}s fetching {locator.host}:{locator.port}"
            ) from None
        except OSError as e:
            raise GopherError(f"Error fetching {locator.host}:{locator.port}: {e}") from e
        except (ValueError, OverflowError) as e:
            # IDNA failures on malformed hostnames surface as UnicodeError
            raise GopherError(f"Invalid address {locator.host}:{locator.port}: {e}") from e

        # Search results come back as a menu
        item_type = ItemType.MENU if locator.item_type is ItemType.SEARCH else locator.item_type
        return GopherResponse(item_type=item_type, body=body)

    async def _request(self, host: str, port: int, request: str) -> bytes:
        reader, writer = await asyncio.open_connection(host, port)
        try:
            writer.write(f"{request}\r\n".encode("utf-8", errors="replace"))
            await writer.drain()
            chunks = []
            while True:
                data = await reader.read(READ_CHUNK_SIZE)
                if not data:
                    break
                chunks.append(data)
        finally:
            writer.close()
        return b"".join(chunks)
