"""Minimal HTTP request-line handling."""

from dataclasses import dataclass
from urllib.parse import parse_qs, unquote

from .assets import AssetTable

REQUEST_PREFIX = "GET /"
REQUEST_SUFFIX = " HTTP/1.1"
GOPHER_SCHEME = "gopher://"


def path_from_line(line: str) -> str:
    """Return the path of a ``GET /<path> HTTP/1.1`` line, or "" for anything else."""
    if not line.startswith(REQUEST_PREFIX):
        return ""
    end = line.find(REQUEST_SUFFIX)
    if end < len(REQUEST_PREFIX):
        return ""
    return line[len(REQUEST_PREFIX):end]


def _form_value(query: str, name: str) -> str | None:
    values = parse_qs(query, keep_blank_values=True).get(name)
    return values[0] if values else None


def resolve_path(path: str) -> str:
    """Fold form submissions into the path and percent-decode it.

    ``?url=<value>`` comes from the address bar form and resolves to
    ``<value>``; ``<locator>?q=<terms>`` comes from an inline search form
    and resolves to ``<locator>?<terms>``.
    """
    base, sep, query = path.partition("?")
    if sep:
        if not base:
            url = _form_value(query, "url")
            if url is not None:
                return url.strip()
        terms = _form_value(query, "q")
        if terms is not None:
            return f"{unquote(base)}?{terms}"
    return unquote(path)


@dataclass
class Request:
    """One client request, owned by the worker handling its connection."""

    addr: str
    line: str = ""
    path: str = ""

    def parse(self, line: str):
        """Fill out this request from an HTTP request line."""
        self.line = line
        self.path = path_from_line(line)

    @property
    def short_path(self) -> str:
        """Path without a leading gopher:// scheme."""
        if self.path.lower().startswith(GOPHER_SCHEME):
            return self.path[len(GOPHER_SCHEME):]
        return self.path

    @property
    def asset_name(self) -> str:
        return unquote(self.path)

    def is_static_file(self, assets: AssetTable) -> bool:
        return self.asset_name in assets
