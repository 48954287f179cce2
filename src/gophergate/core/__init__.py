"""Gopher client components."""

from .client import GopherClient
from .gopher import DEFAULT_PORT, ItemType, Locator, MenuLine, locator_text, parse_menu
from .protocols import GopherError, GopherFetcher, GopherResponse

__all__ = [
    "DEFAULT_PORT",
    "GopherClient",
    "GopherError",
    "GopherFetcher",
    "GopherResponse",
    "ItemType",
    "Locator",
    "MenuLine",
    "locator_text",
    "parse_menu",
]
