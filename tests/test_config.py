"""Tests for gateway settings."""

import pydantic
import pytest

from gophergate.config import GatewaySettings


class TestGatewaySettings:
    def test_defaults(self, monkeypatch):
        """Defaults should serve floodgap on port 8080 with ten workers."""
        for name in ("HOST", "PORT", "DEFAULT_TARGET", "WORKERS"):
            monkeypatch.delenv(f"GOPHERGATE_{name}", raising=False)
        settings = GatewaySettings()
        assert settings.port == 8080
        assert settings.workers == 10
        assert settings.request_buffer_size == 512
        assert settings.default_target == "gopher://gopher.floodgap.com/"

    def test_environment(self, monkeypatch):
        """GOPHERGATE_ variables should override the defaults."""
        monkeypatch.setenv("GOPHERGATE_PORT", "7071")
        monkeypatch.setenv("GOPHERGATE_DEFAULT_TARGET", "sdf.org")
        settings = GatewaySettings()
        assert settings.port == 7071
        assert settings.default_target == "sdf.org"

    def test_frozen(self):
        """Settings should be immutable once loaded."""
        settings = GatewaySettings()
        with pytest.raises(pydantic.ValidationError):
            settings.port = 1
