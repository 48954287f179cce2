"""Tests for GopherClient."""

import socket

import pytest

from gophergate.core import GopherClient, GopherError, GopherResponse, ItemType, Locator


def _closed_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestGopherClient:
    async def test_fetch_root_menu(self, gopher_server):
        """Fetching a bare host should send an empty selector."""
        client = GopherClient(timeout=5.0)
        response = await client.fetch(Locator.parse(gopher_server.url()))

        assert isinstance(response, GopherResponse)
        assert response.item_type is ItemType.MENU
        assert gopher_server.requests == [""]
        assert response.text.startswith("iWelcome")

    async def test_fetch_text(self, gopher_server):
        """Text items should come back raw, escapes included."""
        client = GopherClient(timeout=5.0)
        response = await client.fetch(Locator.parse(gopher_server.url("/0/readme.txt")))

        assert response.item_type is ItemType.TEXT
        assert response.body == b"Hello \x1b[1mgopher\x1b[0m\r\n.\r\n"
        assert gopher_server.requests == ["/readme.txt"]

    async def test_search_sends_query_after_tab(self, gopher_server):
        """Search queries should be sent as selector TAB query."""
        client = GopherClient(timeout=5.0)
        response = await client.fetch(Locator.parse(gopher_server.url("/7/search?cats")))

        assert gopher_server.requests == ["/search\tcats"]
        assert response.item_type is ItemType.MENU
        assert "Cats" in response.text

    async def test_connection_refused(self):
        """An unreachable server should raise GopherError."""
        client = GopherClient(timeout=5.0)
        port = _closed_port()
        with pytest.raises(GopherError, match=f"127.0.0.1:{port}"):
            await client.fetch(Locator.parse(f"127.0.0.1:{port}/1/"))

    async def test_timeout(self, silent_gopher_server):
        """A server that never answers should time out with GopherError."""
        client = GopherClient(timeout=0.2)
        with pytest.raises(GopherError, match="Timed out"):
            await client.fetch(Locator.parse(silent_gopher_server.url("/1/")))

    async def test_unsupported_type_not_fetched(self):
        """Binary items should be refused without connecting."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError, match="binary"):
            await client.fetch(Locator.parse(f"127.0.0.1:{_closed_port()}/9/file.zip"))

    async def test_missing_host(self):
        """A locator without a host should raise GopherError."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError, match="No host"):
            await client.fetch(Locator.parse("/1/x"))

    @pytest.mark.parametrize(
        "url",
        ["bad..host.example/1/", "a" * 70 + ".example/1/"],
    )
    async def test_malformed_hostname(self, url):
        """Hostnames the resolver cannot encode should raise GopherError."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError, match="Invalid address"):
            await client.fetch(Locator.parse(url))

    async def test_port_out_of_range(self):
        """Ports above 65535 should raise GopherError without connecting."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError, match="Invalid port 99999"):
            await client.fetch(Locator.parse("127.0.0.1:99999/1/"))

    @pytest.mark.parametrize(
        "url",
        ["host.example/0/a\r\nb", "host.example/0/a\tb", "host.example/7/s?x\r\ny"],
    )
    async def test_control_characters_refused(self, url):
        """CR, LF and TAB in a selector or query should be refused before connecting."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError, match="Control characters"):
            await client.fetch(Locator.parse(url))

    async def test_control_characters_not_sent(self, gopher_server):
        """A refused selector should not reach the server."""
        client = GopherClient(timeout=5.0)
        with pytest.raises(GopherError):
            await client.fetch(Locator.parse(gopher_server.url("/0/a\r\n/readme.txt")))
        assert gopher_server.requests == []


class TestGopherResponse:
    def test_text_property(self):
        """text should decode the body as UTF-8."""
        response = GopherResponse(item_type=ItemType.TEXT, body="Café".encode("utf-8"))
        assert response.text == "Café"

    def test_text_handles_invalid_utf8(self):
        """text should not raise on invalid UTF-8."""
        response = GopherResponse(item_type=ItemType.TEXT, body=b"\xff\xfe")
        assert isinstance(response.text, str)
