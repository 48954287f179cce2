"""Turn user input into a Gopher locator or a search query."""

from .core import Locator

SEARCH_ENGINE = "gopher.floodgap.com/7/v2/vs?"


def is_search_query(text: str) -> bool:
    """Guess whether ``text`` is a search query rather than a locator.

    Input with a space and no slash is a query, and so is a bare word with
    neither a dot nor a slash. A dotless hostname is therefore read as a
    query; that is accepted behavior.
    """
    if "/" in text:
        return False
    return " " in text or "." not in text


def normalize_url(text: str) -> str:
    """Normalize user input to locator text (no ``gopher://`` prefix)."""
    if is_search_query(text):
        return SEARCH_ENGINE + text
    if text.lower().startswith("gopher://"):
        text = text[len("gopher://"):]
    return text.replace("%20", " ")


def normalize(text: str) -> Locator:
    """Resolve user input to a :class:`Locator`."""
    return Locator.parse(normalize_url(text))
