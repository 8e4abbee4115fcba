"""Tests for hopx_mcp.server.mcp_server module."""

import asyncio
import json
import sys
from unittest.mock import AsyncMock, Mock

import httpx
from loguru import logger
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from hopx_mcp.credentials import current_credential
from hopx_mcp.server.config import ServerConfig
from hopx_mcp.server.mcp_server import (
    CredentialMiddleware,
    _describe_rpc,
    _redacted_headers,
    configure_logging,
    create_app,
)

# --- CredentialMiddleware tests ---


async def test_credential_middleware_binds_bearer_token():
    """Downstream handlers should see the request's bearer token."""
    seen = []

    async def call_next(request):
        seen.append(current_credential())
        return "response"

    middleware = CredentialMiddleware(app=Mock())
    request = Mock()
    request.headers.get = Mock(return_value="Bearer hopx-key-1")

    result = await middleware.dispatch(request, call_next)

    assert result == "response"
    assert seen == ["hopx-key-1"]
    assert current_credential() is None


async def test_credential_middleware_binds_absent_without_header():
    """Requests without Authorization are passed on with no credential."""
    seen = []

    async def call_next(request):
        seen.append(current_credential())
        return "response"

    middleware = CredentialMiddleware(app=Mock())
    request = Mock()
    request.headers.get = Mock(return_value=None)

    result = await middleware.dispatch(request, call_next)

    assert result == "response"
    assert seen == [None]


async def test_credential_middleware_ignores_other_schemes():
    """Non-bearer Authorization values bind no credential and are not rejected."""
    call_next = AsyncMock(return_value="response")
    middleware = CredentialMiddleware(app=Mock())
    request = Mock()
    request.headers.get = Mock(return_value="Basic dXNlcjpwYXNz")

    result = await middleware.dispatch(request, call_next)

    assert result == "response"
    call_next.assert_awaited_once_with(request)


async def _whoami(request: Request) -> JSONResponse:
    await asyncio.sleep(0)
    return JSONResponse({"token": current_credential(), "method": request.method})


def _whoami_app() -> Starlette:
    return Starlette(
        routes=[Route("/mcp", _whoami, methods=["GET", "POST", "DELETE"])],
        middleware=[Middleware(CredentialMiddleware)],
    )


async def test_credential_reaches_endpoint_for_every_method():
    """GET, POST and DELETE on the MCP route all run with the caller's key."""
    transport = httpx.ASGITransport(app=_whoami_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://127.0.0.1:8080") as client:
        for method in ("GET", "POST", "DELETE"):
            response = await client.request(method, "/mcp", headers={"Authorization": "Bearer key-1"})
            assert response.json() == {"token": "key-1", "method": method}

        anonymous = await client.get("/mcp")
        assert anonymous.json()["token"] is None


async def test_concurrent_requests_are_isolated():
    """Concurrent requests with different keys each see only their own."""
    transport = httpx.ASGITransport(app=_whoami_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://127.0.0.1:8080") as client:
        responses = await asyncio.gather(
            *(client.post("/mcp", headers={"Authorization": f"Bearer key-{i}"}) for i in range(10))
        )

    assert [r.json()["token"] for r in responses] == [f"key-{i}" for i in range(10)]


# --- App wiring ---


async def test_create_app_serves_health_without_credentials():
    app = create_app(ServerConfig(path="/mcp"))
    paths = {getattr(route, "path", None) for route in app.routes}
    assert {"/mcp", "/health"} <= paths

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://127.0.0.1:8080") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def _rpc(request_id: int, name: str, arguments: dict) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


def _tool_text(response: httpx.Response) -> str:
    assert response.status_code == 200, response.text
    return response.json()["result"]["content"][0]["text"]


async def test_tool_calls_through_mcp_route_use_each_callers_key(installed_client, backend):
    """End to end: inbound bearer key → FastMCP tool → outbound HOPX call."""
    backend.reply(200, {"id": "sbx_1", "status": "running"})
    app = create_app(ServerConfig(path="/mcp"))
    headers = {"Accept": "application/json, text/event-stream", "Content-Type": "application/json"}

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://127.0.0.1:8080") as client:
            alice, bob, anonymous = await asyncio.gather(
                client.post(
                    "/mcp",
                    content=json.dumps(_rpc(1, "get_sandbox", {"id": "sbx_1"})),
                    headers={**headers, "Authorization": "Bearer key-alice"},
                ),
                client.post(
                    "/mcp",
                    content=json.dumps(_rpc(2, "get_sandbox", {"id": "sbx_1"})),
                    headers={**headers, "Authorization": "Bearer key-bob"},
                ),
                client.post(
                    "/mcp",
                    content=json.dumps(_rpc(3, "get_sandbox", {"id": "sbx_1"})),
                    headers=headers,
                ),
            )

    assert '"sbx_1"' in _tool_text(alice)
    assert '"sbx_1"' in _tool_text(bob)
    assert _tool_text(anonymous).startswith("Failed to get sandbox: No HOPX API key provided")
    assert sorted(r.headers["Authorization"] for r in backend.requests) == [
        "Bearer key-alice",
        "Bearer key-bob",
    ]


# --- Logging ---


def test_redacted_headers_hide_credentials():
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/mcp",
        "headers": [
            (b"authorization", b"Bearer secret"),
            (b"x-api-key", b"secret"),
            (b"content-type", b"application/json"),
        ],
    }
    headers = _redacted_headers(Request(scope))

    assert headers["authorization"] == "<redacted>"
    assert headers["x-api-key"] == "<redacted>"
    assert headers["content-type"] == "application/json"


def test_request_log_summarises_tool_calls_without_secrets():
    body = json.dumps(_rpc(7, "env_set", {"sandbox_id": "sbx1", "env_vars": {"API_TOKEN": "s3cret"}}))

    summary = _describe_rpc(body.encode())

    assert summary.startswith("tools/call env_set id=7")
    assert "API_TOKEN" in summary
    assert "s3cret" not in summary


def test_request_log_handles_other_bodies():
    assert _describe_rpc(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize"}).encode()) == "initialize id=1"
    assert _describe_rpc(b"") == "<0 bytes, not JSON>"
    assert _describe_rpc(b"not json") == "<8 bytes, not JSON>"


def test_configure_logging_adds_file_sink(tmp_path):
    log_file = tmp_path / "hopx.log"
    try:
        configure_logging(ServerConfig(log_file=str(log_file), log_level="info"))
        logger.info("hello from the test")
        assert "hello from the test" in log_file.read_text()
    finally:
        logger.remove()
        logger.add(sys.stderr)
