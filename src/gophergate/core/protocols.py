"""Protocol definitions for the Gopher client seam."""

from dataclasses import dataclass
from typing import Protocol

from .gopher import ItemType, Locator


class GopherError(Exception):
    """A Gopher resource could not be retrieved."""


@dataclass
class GopherResponse:
    """Gopher response container."""

    item_type: ItemType
    body: bytes

    @property
    def text(self) -> str:
        """Decode body as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


class GopherFetcher(Protocol):
    """Protocol for Gopher fetchers."""

    async def fetch(self, locator: Locator) -> GopherResponse:
        """Fetch a locator and return the response, or raise GopherError."""
        ...
