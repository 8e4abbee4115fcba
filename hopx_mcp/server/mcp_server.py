"""MCP server exposing the HOPX API, authenticated per request."""

import json
import sys
import time
import uuid

from loguru import logger
from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import ClientDisconnect, Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..credentials import credential_scope, extract_bearer_token, mask_token
from ..utils import format_for_log, indent
from . import tools  # noqa: F401  (registers the tool catalogue)
from .config import ServerConfig
from .registry import get_client, mcp

_SENSITIVE_HEADERS = {"authorization", "x-api-key", "cookie"}


def _redacted_headers(request: Request) -> dict[str, str]:
    """Request headers with credentials masked."""
    return {
        key: ("<redacted>" if key.lower() in _SENSITIVE_HEADERS else value) for key, value in request.headers.items()
    }


def _describe_rpc(body: bytes) -> str:
    """Summarise a JSON-RPC request body for the log, tool arguments scrubbed."""
    try:
        message = json.loads(body)
    except ValueError:
        return f"<{len(body)} bytes, not JSON>"

    lines = []
    for item in message if isinstance(message, list) else [message]:
        if not isinstance(item, dict):
            lines.append(format_for_log(item, 200))
            continue
        params = item.get("params")
        if item.get("method") == "tools/call" and isinstance(params, dict):
            lines.append(f"tools/call {params.get('name')} id={item.get('id')}")
            lines.append(format_for_log(params.get("arguments")))
        else:
            lines.append(f"{item.get('method', 'response')} id={item.get('id')}")
    return "\n".join(lines)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each MCP request (headers and tool arguments redacted) and its status."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        summary = f"[{request_id}] ▶ {request.method} {request.url.path}\n    Headers: {_redacted_headers(request)}"
        if request.method in ("POST", "PUT", "PATCH"):
            try:
                body = await request.body()
            except ClientDisconnect:
                logger.info(f"{summary}\n    Body: <client disconnected>")
                raise
            logger.info(f"{summary}\n    Body:\n{indent(_describe_rpc(body), 8)}")
        else:
            logger.info(summary)

        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        logger.info(f"[{request_id}] ◀ {response.status_code} ({duration_ms:.1f}ms)")

        return response


class CredentialMiddleware(BaseHTTPMiddleware):
    """Bind the caller's HOPX API key for the lifetime of the request.

    Requests without a usable ``Authorization: Bearer`` header are not
    rejected; tools called on them report the missing key instead.
    """

    async def dispatch(self, request: Request, call_next):
        token = extract_bearer_token(request.headers.get("Authorization"))

        logger.info(
            f"HOPX MCP request received: hasAuth={token is not None} "
            f"apiKeyPrefix={mask_token(token)} method={request.method} url={request.url.path}"
        )

        with credential_scope(token):
            return await call_next(request)


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "healthy"})


def configure_logging(config: ServerConfig) -> None:
    """Configure loguru sinks for the server."""
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    if config.log_file:
        logger.add(
            config.log_file,
            level=config.log_level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}",
        )


def create_app(config: ServerConfig | None = None) -> Starlette:
    """Build the ASGI app: the MCP route plus /health, wrapped in middleware."""
    config = config or ServerConfig()
    mcp.settings.streamable_http_path = config.path

    app = mcp.streamable_http_app()
    app.routes.append(Route("/health", health_check, methods=["GET"]))

    # Added last runs first: logging wraps credential binding.
    app.add_middleware(CredentialMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    return app


def serve(config: ServerConfig) -> None:
    """Run the MCP server until interrupted."""
    import uvicorn

    configure_logging(config)
    settings = get_client().settings

    logger.info("=" * 60)
    logger.info("Starting HOPX MCP Server")
    logger.info(f"  Host: {config.host}")
    logger.info(f"  Port: {config.port}")
    logger.info(f"  Path: {config.path}")
    logger.info(f"  HOPX API: {settings.api_base_url}")
    logger.info(f"  Agent domain: {settings.agent_domain}")
    logger.info(f"  Control plane auth: {settings.control_plane_auth}")
    logger.info("=" * 60)

    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level.lower())


def main() -> None:
    """Run the MCP server configured from the environment."""
    serve(ServerConfig.from_env())


if __name__ == "__main__":
    main()
