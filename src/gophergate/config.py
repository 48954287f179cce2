"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class GatewaySettings(BaseSettings):
    """Gateway configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    default_target: str = "gopher://gopher.floodgap.com/"
    workers: int = 10
    request_buffer_size: int = 512
    gopher_timeout: float = 15.0
    title: str = "gophergate"

    model_config = {"env_prefix": "GOPHERGATE_", "frozen": True}


settings = GatewaySettings()
