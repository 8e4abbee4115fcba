"""MCP server for the HOPX API."""

from .config import ServerConfig
from .mcp_server import CredentialMiddleware, RequestLoggingMiddleware, create_app, main, serve
from .registry import get_client, hopx_tool, mcp, set_client

__all__ = [
    # Server
    "mcp",
    "main",
    "serve",
    "create_app",
    # Config
    "ServerConfig",
    # Middleware
    "CredentialMiddleware",
    "RequestLoggingMiddleware",
    # Tools
    "hopx_tool",
    "get_client",
    "set_client",
]
