"""Tool registration for the HOPX MCP server.

Every tool goes through ``hopx_tool``, which turns whatever its handler
produces (a ``CallResult``, custom text, or one of the client's errors) into
the text returned to the caller. Handlers never fail at the protocol level.
"""

import inspect
import time
import uuid
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any
from urllib.parse import quote

from loguru import logger
from mcp.server.fastmcp import FastMCP

from ..client import (
    CallResult,
    HopxClient,
    HopxTransportError,
    InvalidArgumentError,
    UnauthenticatedError,
)
from ..config import load_settings
from ..utils import format_for_log, pretty_json

WORKSPACE_ROOT = "/workspace"
DEFAULT_EXEC_TIMEOUT = 30

mcp = FastMCP(
    "HOPX MCP Server",
    instructions=(
        "Tools for managing HOPX sandboxes: create and inspect sandboxes, run code and "
        "shell commands, and manage files, environment variables and caches inside them."
    ),
    stateless_http=True,
    json_response=True,
)

_client: HopxClient | None = None


def get_client() -> HopxClient:
    """Return the process-wide HOPX client, creating it from the environment on first use."""
    global _client
    if _client is None:
        _client = HopxClient(load_settings())
    return _client


def set_client(client: HopxClient | None) -> None:
    """Replace the process-wide client (None to rebuild from the environment)."""
    global _client
    _client = client


def require(value: str | None, field: str) -> str:
    """Reject missing or blank string arguments."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(field, "must not be empty")
    return value


def segment(value: str | None, field: str) -> str:
    """Quote a value for use as one URL path segment."""
    return quote(require(value, field), safe="")


def render_outcome(outcome: CallResult | str, doing: str, success_label: str | None = None) -> str:
    """Turn a handler's outcome into tool text."""
    if isinstance(outcome, str):
        return outcome
    if not outcome.ok:
        return f"Error {doing}: {outcome.error_detail()}"
    text = pretty_json(outcome.payload) if outcome.payload is not None else "OK"
    if success_label:
        return f"{success_label}\n{text}"
    return text


def log_tool_call(func: Callable, *, log_result: bool = True) -> Callable:
    """Log a tool invocation: scrubbed arguments, the sandbox it targets, duration and text.

    With ``log_result=False`` only the size of the returned text is logged.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        call_id = uuid.uuid4().hex[:8]
        sandbox_id = kwargs.get("sandbox_id") or kwargs.get("id")
        tool = f"{func.__name__} [{sandbox_id}]" if sandbox_id else func.__name__

        logger.info(f"[{call_id}] 🔧 TOOL CALL: {tool}\n    Args: {format_for_log(kwargs)}")

        start_time = time.time()
        try:
            text = await func(*args, **kwargs)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(f"[{call_id}] ❌ TOOL ERROR: {tool} ({duration_ms:.1f}ms): {type(e).__name__}: {e}")
            raise

        duration_ms = (time.time() - start_time) * 1000
        shown = format_for_log(text) if log_result else f"<{len(text)} chars>"
        logger.info(f"[{call_id}] ✅ TOOL RESULT: {tool} ({duration_ms:.1f}ms)\n    Result: {shown}")
        return text

    return wrapper


def hopx_tool(
    *,
    doing: str,
    do: str,
    success_label: str | None = None,
    failure_prefix: str | None = None,
    log_result: bool = True,
    name: str | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[str]]]:
    """Register a handler as an MCP tool.

    ``doing`` and ``do`` name the action in error text, e.g. "Error listing
    sandboxes: ..." and "Failed to list sandboxes: ...". ``failure_prefix``
    replaces the "Failed to <do>" lead for tools with their own wording.
    Tools whose text carries secrets pass ``log_result=False``.
    """
    failed = failure_prefix or f"Failed to {do}"

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[str]]:
        @wraps(func)
        async def run(*args, **kwargs) -> str:
            try:
                outcome = await func(*args, **kwargs)
            except InvalidArgumentError as e:
                return f"Error {doing}: {e}"
            except (UnauthenticatedError, HopxTransportError) as e:
                return f"{failed}: {e}"
            return render_outcome(outcome, doing, success_label)

        # FastMCP derives the input schema from this signature; the output is always text.
        run.__signature__ = inspect.signature(func).replace(return_annotation=str)

        tool = log_tool_call(run, log_result=log_result)
        mcp.tool(name=name)(tool)
        return tool

    return decorator
