"""Shared fixtures for hopx_mcp tests."""

import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from hopx_mcp.client import HopxClient
from hopx_mcp.config import HopxSettings
from hopx_mcp.server.registry import set_client


class RecordingBackend:
    """Stand-in for the HOPX API that records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.payload: Any = {"ok": True}
        self.error: Exception | None = None

    def reply(self, status: int = 200, payload: Any = None) -> None:
        self.status = status
        self.payload = payload

    def fail_with(self, error: Exception) -> None:
        self.error = error

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.payload is None:
            return httpx.Response(self.status)
        if isinstance(self.payload, str):
            return httpx.Response(self.status, text=self.payload)
        return httpx.Response(self.status, json=self.payload)

    async def dispatch(self, request: httpx.Request) -> httpx.Response:
        return await self.handler(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def settings() -> HopxSettings:
    """Settings pointing at test hosts."""
    return HopxSettings(api_base_url="https://api.test.hopx", agent_domain="agents.test.hopx")


@pytest.fixture
def backend() -> RecordingBackend:
    """A fresh recording backend."""
    return RecordingBackend()


@pytest.fixture
def client(settings: HopxSettings, backend: RecordingBackend) -> HopxClient:
    """A client whose calls go to the recording backend."""
    return HopxClient(settings, transport=httpx.MockTransport(backend.dispatch))


@pytest.fixture
def installed_client(client: HopxClient) -> Generator[HopxClient, None, None]:
    """Install the recording client as the one tools use, then reset."""
    set_client(client)
    try:
        yield client
    finally:
        set_client(None)

