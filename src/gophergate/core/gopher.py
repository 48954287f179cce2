"""Gopher item types, locators and menu parsing."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_PORT = 70


class ItemType(Enum):
    """Gopher item type, keyed by its type character."""

    TEXT = "0"
    MENU = "1"
    CSO_ENTITY = "2"
    ERROR = "3"
    BINHEX = "4"
    DOS_FILE = "5"
    UUENCODED = "6"
    SEARCH = "7"
    TELNET = "8"
    BINARY = "9"
    MIRROR = "+"
    GIF = "g"
    TELNET3270 = "T"
    HTML = "h"
    INFO = "i"
    IMAGE = "I"
    SOUND = "s"
    DOCUMENT = "d"
    VIDEO = ";"
    MIME = "M"
    CALENDAR = "c"
    PNG = "p"
    UNKNOWN = "?"

    @classmethod
    def from_char(cls, char: str) -> "ItemType":
        try:
            return cls(char)
        except ValueError:
            return cls.UNKNOWN

    @property
    def css_class(self) -> str:
        return self.name.lower().replace("_", "-")

    @property
    def is_text(self) -> bool:
        return self is ItemType.TEXT

    @property
    def is_proxyable(self) -> bool:
        """Whether the gateway can fetch and render this type as HTML."""
        return self in _PROXYABLE

    @property
    def is_linked(self) -> bool:
        """Whether a menu line of this type is wrapped in a hyperlink."""
        return self not in (ItemType.INFO, ItemType.SEARCH)


_PROXYABLE = frozenset({
    ItemType.TEXT,
    ItemType.MENU,
    ItemType.ERROR,
    ItemType.SEARCH,
    ItemType.MIRROR,
})


def locator_text(host: str, port: int, type_char: str, selector: str) -> str:
    """Build the short ``host[:port]/Tselector`` form of a Gopher resource."""
    if port == DEFAULT_PORT:
        return f"{host}/{type_char}{selector}"
    return f"{host}:{port}/{type_char}{selector}"


def _split_host_port(host_port: str) -> tuple[str, int]:
    if host_port.startswith("["):
        # [ipv6]:port
        host, _, tail = host_port[1:].partition("]")
        port_str = tail[1:] if tail.startswith(":") else ""
    elif host_port.count(":") == 1:
        host, port_str = host_port.split(":", 1)
    else:
        host, port_str = host_port, ""

    try:
        port = int(port_str) if port_str else DEFAULT_PORT
    except ValueError:
        port = DEFAULT_PORT
    return host, port


@dataclass(frozen=True)
class Locator:
    """A resolved Gopher resource: direct, search query, or external URL."""

    text: str
    host: str
    port: int = DEFAULT_PORT
    item_type: ItemType = ItemType.MENU
    selector: str = ""
    query: str | None = None

    @classmethod
    def parse(cls, text: str) -> "Locator":
        """Parse ``[gopher://]host[:port][/T[selector]][?query]``.

        Inputs carrying any other ``scheme://`` become HTML-type locators
        pointing at the literal input. A ``?query`` is only split off for
        search types, since ordinary selectors may contain ``?``.
        """
        body = text
        if body.lower().startswith("gopher://"):
            body = body[len("gopher://"):]
        elif "://" in body:
            return cls(text=text, host="", port=0, item_type=ItemType.HTML, selector=text)

        host_port, _, rest = body.partition("/")
        host, port = _split_host_port(host_port)

        if not rest:
            return cls(text=text, host=host, port=port)

        item_type = ItemType.from_char(rest[0])
        if item_type is ItemType.UNKNOWN:
            return cls(text=text, host=host, port=port, item_type=ItemType.MENU, selector=rest)

        selector = rest[1:]
        query = None
        if item_type is ItemType.SEARCH and "?" in selector:
            selector, query = selector.split("?", 1)
        return cls(
            text=text,
            host=host,
            port=port,
            item_type=item_type,
            selector=selector,
            query=query,
        )

    @property
    def is_external(self) -> bool:
        return self.item_type is ItemType.HTML and not self.host

    def __str__(self) -> str:
        return self.text


@dataclass
class MenuLine:
    """One entry of a Gopher menu."""

    type_char: str
    name: str
    selector: str
    host: str
    port: int

    @property
    def item_type(self) -> ItemType:
        return ItemType.from_char(self.type_char)

    @property
    def url(self) -> str:
        """Target of this line, relative to the gateway root unless external."""
        item_type = self.item_type
        if item_type is ItemType.HTML and self.selector.startswith("URL:"):
            return self.selector[len("URL:"):]
        if item_type in (ItemType.TELNET, ItemType.TELNET3270):
            return f"telnet://{self.host}:{self.port}"
        return locator_text(self.host, self.port, self.type_char, self.selector)

    @property
    def is_external(self) -> bool:
        return "://" in self.url


def _make_menu_line(type_char: str, fields: list[str]) -> MenuLine:
    name = fields[0] if len(fields) > 0 else ""
    selector = fields[1] if len(fields) > 1 else ""
    host = fields[2] if len(fields) > 2 else ""
    port_raw = fields[3] if len(fields) > 3 else ""
    try:
        port = int(port_raw) if port_raw else DEFAULT_PORT
    except ValueError:
        port = DEFAULT_PORT
    return MenuLine(
        type_char=type_char or "i",
        name=name,
        selector=selector,
        host=host,
        port=port,
    )


def parse_menu(text: str) -> list[MenuLine]:
    """Parse a Gopher menu body into its lines, in order."""
    out: list[MenuLine] = []
    for raw_line in text.splitlines():
        line = raw_line.rstrip("\r")
        if line.strip() == ".":
            break
        if not line:
            continue
        out.append(_make_menu_line(line[0], line[1:].split("\t")))
    return out
