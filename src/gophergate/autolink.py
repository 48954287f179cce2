"""Wrap bare URLs in already-escaped text with HTML links."""

import re

# ASCII punctuation, standing in for POSIX [:punct:]
_PUNCT = r"!-/:-@\[-`{-~"

# An escaped <, >, " or ' ends a URL the same way the raw character would
_ENTITY_BOUNDARY = r"&(?:lt|gt|quot|#x27|#39);"

URL_PATTERN = re.compile(
    r"\b(?:[\w-]+://?|www[.])"
    rf"(?:(?!{_ENTITY_BOUNDARY})[^\s()<>])+"
    r"(?:\([\w\d]+\)|[^" + _PUNCT + r"\s]|/)"
)


def link_target(url: str) -> str:
    """Gopher URLs stay inside the gateway; anything else is linked as-is."""
    if url.lower().startswith("gopher://"):
        return "/" + url[len("gopher://"):]
    return url


def auto_link(text: str) -> str:
    """Wrap URLs in ``text`` with ``<a>`` tags.

    ``text`` must already be HTML-escaped: the matched URL is inserted into
    the ``href`` attribute verbatim.
    """
    if not text:
        return ""
    return URL_PATTERN.sub(
        lambda match: f'<a href="{link_target(match.group(0))}">{match.group(0)}</a>',
        text,
    )
