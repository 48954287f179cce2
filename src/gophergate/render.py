"""Render Gopher responses as HTML."""

import html
import re
from dataclasses import dataclass

from .autolink import auto_link
from .core import GopherResponse, ItemType, Locator, MenuLine, parse_menu
from .escapes import strip

END_OF_TEXT = ".\r\n"

_PLACEHOLDER = re.compile(r"\{\{(content|url|title)\}\}")


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def needs_fetch(locator: Locator) -> bool:
    """Whether rendering ``locator`` requires a response from the Gopher client."""
    if locator.item_type is ItemType.SEARCH and locator.query is None:
        return False
    return locator.item_type.is_proxyable


def to_html(locator: Locator, response: GopherResponse | None = None) -> str:
    """Convert a Gopher response into an HTML fragment.

    ``response`` is None for locators that are not fetched (see
    :func:`needs_fetch`): a search endpoint without a query gets a search
    form, anything else a one-line notice.
    """
    if response is None:
        if locator.item_type is ItemType.SEARCH:
            return search_prompt_html(locator)
        return unsupported_html(locator)
    if response.item_type.is_text:
        return to_text_html(response.body)
    return to_menu_html(response.text)


def to_text_html(body: bytes) -> str:
    """Render a Gopher text file.

    Escape sequences are stripped first so control noise never reaches the
    URL scanner, and the text is HTML-escaped before links are inserted so
    the link markup itself is left alone.
    """
    text = strip(body).decode("utf-8", errors="replace")
    while text.endswith(END_OF_TEXT):
        text = text[:-len(END_OF_TEXT)]
    return f"<div class='text'>{auto_link(html.escape(text))}</div>"


def to_menu_html(text: str) -> str:
    """Render a Gopher menu, one ``div.line`` per menu line."""
    out = []
    for line in parse_menu(text):
        item_type = line.item_type
        out.append(f"<div class='line {item_type.css_class}'>")
        if item_type.is_linked:
            href = line.url if line.is_external else f"/{line.url}"
            out.append(f"<a href='{_attr(href)}'>")

        if not line.name:
            out.append("&nbsp;")
        elif item_type is ItemType.SEARCH:
            out.append(to_search_html(line))
        else:
            out.append(html.escape(line.name))

        if item_type.is_linked:
            out.append("</a>")
        out.append("</div>")
    return "".join(out)


def _search_form(action: str, placeholder: str) -> str:
    return (
        f"<form class='search' action='/{_attr(action)}'>"
        f"<input type='text' name='q' placeholder='{_attr(placeholder)}'>"
        "<input type='submit' value='Search'>"
        "</form>"
    )


def to_search_html(line: MenuLine) -> str:
    """Inline search form for a search-type menu line."""
    return _search_form(line.url, line.name)


def search_prompt_html(locator: Locator) -> str:
    """Standalone search form for a search locator opened without a query."""
    return f"<div class='line search'>{_search_form(str(locator), 'Search')}</div>"


def unsupported_html(locator: Locator) -> str:
    """One-line notice for item types the gateway does not proxy."""
    if locator.is_external:
        href = _attr(locator.selector)
        return f"<div class='line html'>External link: <a href='{href}'>{href}</a></div>"
    item_type = locator.item_type
    return (
        f"<div class='line {item_type.css_class}'>"
        f"Can't display {item_type.css_class} items: {html.escape(str(locator))}"
        "</div>"
    )


def error_html(message: str) -> str:
    """Render a failure description as a one-line text body."""
    return to_text_html(message.encode("utf-8"))


@dataclass
class RenderedPage:
    """Values substituted into the page layout."""

    content: str
    url: str
    title: str

    def assemble(self, layout: str) -> str:
        """Fill the layout's placeholders in a single pass."""
        values = {
            "content": self.content,
            "url": _attr(self.url),
            "title": html.escape(self.title),
        }
        return _PLACEHOLDER.sub(lambda match: values[match.group(1)], layout)
