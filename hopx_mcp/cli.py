#!/usr/bin/env python3
"""CLI entrypoint for the HOPX MCP server."""

import sys

import click
from dotenv import load_dotenv
from pydantic import ValidationError

from .client import HopxClient
from .config import load_settings
from .server.config import ServerConfig
from .server.mcp_server import serve
from .server.registry import set_client

# Load environment variables
load_dotenv()


@click.command()
@click.option("--host", envvar="HOPX_MCP_HOST", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", envvar="HOPX_MCP_PORT", type=int, default=8080, show_default=True, help="Port to listen on")
@click.option("--path", envvar="HOPX_MCP_PATH", default="/mcp", show_default=True, help="Route serving MCP requests")
@click.option("--log-file", envvar="HOPX_MCP_LOG_FILE", type=click.Path(dir_okay=False), help="Also log to this file")
@click.option("-d", "--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="hopx-mcp")
def main(host: str, port: int, path: str, log_file: str | None, debug: bool) -> None:
    """
    Serve the HOPX sandbox API as MCP tools over streamable HTTP.

    Clients authenticate each request with "Authorization: Bearer <HOPX API key>".
    """
    try:
        settings = load_settings()
    except ValidationError as e:
        click.echo(f"Error: invalid HOPX settings: {e}", err=True)
        sys.exit(1)

    set_client(HopxClient(settings))
    config = ServerConfig(
        host=host,
        port=port,
        path=path,
        log_file=log_file,
        log_level="DEBUG" if debug else "INFO",
    )
    serve(config)


if __name__ == "__main__":
    main()
