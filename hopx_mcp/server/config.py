"""Configuration for the MCP HTTP server."""

import os
from dataclasses import dataclass

from ..config import _get_int_env


@dataclass
class ServerConfig:
    """Configuration for the MCP HTTP server."""

    host: str = "127.0.0.1"
    port: int = 8080
    path: str = "/mcp"  # single route serving GET, POST and DELETE
    log_file: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.path.startswith("/"):
            self.path = "/" + self.path
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build a config from HOPX_MCP_* environment variables."""
        return cls(
            host=os.getenv("HOPX_MCP_HOST", "127.0.0.1"),
            port=_get_int_env("HOPX_MCP_PORT", 8080),
            path=os.getenv("HOPX_MCP_PATH", "/mcp"),
            log_file=os.getenv("HOPX_MCP_LOG_FILE") or None,
            log_level=os.getenv("HOPX_MCP_LOG_LEVEL", "INFO"),
        )
