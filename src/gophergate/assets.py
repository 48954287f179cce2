"""Static assets bundled with the package."""

from collections.abc import Mapping
from importlib import resources
from pathlib import PurePosixPath
from types import MappingProxyType

LAYOUT = "layout.html"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".html": "text/html",
}
DEFAULT_CONTENT_TYPE = "text/plain"


class AssetError(Exception):
    """A required asset is missing or unreadable."""


def content_type_for(name: str) -> str:
    """Content type for an asset name, from its file extension."""
    return CONTENT_TYPES.get(PurePosixPath(name).suffix.lower(), DEFAULT_CONTENT_TYPE)


class AssetTable:
    """Read-only table of asset name to bytes, built once at startup."""

    def __init__(self, files: Mapping[str, bytes]):
        self._files = MappingProxyType(dict(files))

    @classmethod
    def from_package(cls, package: str = "gophergate.static") -> "AssetTable":
        """Load every file shipped in ``package``."""
        files = {}
        for entry in resources.files(package).iterdir():
            if entry.is_file() and not entry.name.startswith(("_", ".")):
                files[entry.name] = entry.read_bytes()
        return cls(files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def get(self, name: str) -> bytes | None:
        return self._files.get(name)

    def text(self, name: str) -> str:
        """Return an asset decoded as UTF-8, or raise AssetError."""
        data = self._files.get(name)
        if data is None:
            raise AssetError(f"Asset not found: {name}")
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AssetError(f"Asset {name} is not valid UTF-8: {e}") from e

    def layout(self) -> str:
        return self.text(LAYOUT)
