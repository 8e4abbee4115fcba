"""Authenticated HTTP calls to the HOPX API."""

import json
import re
import time
import uuid
from dataclasses import dataclass
from typing import Any, Literal

import httpx
from loguru import logger

from . import __version__
from .config import HopxSettings
from .credentials import current_credential
from .utils import format_for_log

# A sandbox id becomes the leftmost label of the agent host name.
_SANDBOX_ID_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9])?$")


class HopxError(Exception):
    """Base class for failures that never reach a successful HTTP exchange."""


class InvalidArgumentError(HopxError):
    """Raised when a tool argument is rejected before any network call."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"invalid argument '{field}': {message}")


class UnauthenticatedError(HopxError):
    """Raised when no API key is bound to the current request."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No HOPX API key provided. Please configure your HOPX API key in the MCP server settings."
        )


class HopxTransportError(HopxError):
    """Raised when the HTTP exchange itself failed (DNS, connect, timeout, unreadable body)."""

    def __init__(self, reason: str, cause: BaseException):
        self.reason = reason
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"{reason} ({type(cause).__name__}): {detail}")


@dataclass(frozen=True)
class Target:
    """Which HOPX host a call goes to."""

    kind: Literal["control_plane", "agent"]
    sandbox_id: str | None = None

    @classmethod
    def agent(cls, sandbox_id: str) -> "Target":
        """The in-sandbox agent of ``sandbox_id``."""
        if not sandbox_id or not _SANDBOX_ID_PATTERN.match(sandbox_id):
            raise InvalidArgumentError("sandbox_id", f"'{sandbox_id}' is not a valid sandbox ID")
        return cls(kind="agent", sandbox_id=sandbox_id)


CONTROL_PLANE = Target(kind="control_plane")


@dataclass(frozen=True)
class CallResult:
    """Outcome of an HTTP exchange that completed, whatever its status."""

    status: int
    payload: Any
    method: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def kind(self) -> Literal["success", "remote_error"]:
        return "success" if self.ok else "remote_error"

    def error_detail(self) -> str:
        """Status and body of a failed call, as one line."""
        if isinstance(self.payload, str):
            body = self.payload
        else:
            body = json.dumps(self.payload, default=str)
        return f"HTTP {self.status}: {body}"


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _drop_none(values: dict[str, Any] | None) -> dict[str, Any] | None:
    if values is None:
        return None
    return {key: value for key, value in values.items() if value is not None}


class HopxClient:
    """Sends one request per call, authenticated with the current request's key.

    A fresh ``httpx.AsyncClient`` is used per call so nothing outlives the
    tool invocation that issued it.
    """

    def __init__(
        self,
        settings: HopxSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or HopxSettings()
        self._transport = transport

    def base_url(self, target: Target) -> str:
        if target.kind == "agent":
            return f"https://{target.sandbox_id}.{self.settings.agent_domain}"
        return self.settings.api_base_url

    def _headers(self, target: Target, token: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"hopx-mcp/{__version__}",
        }
        if target.kind == "control_plane" and self.settings.control_plane_auth == "api-key":
            headers["X-API-Key"] = token
        else:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _timeout(self, timeout: float | None) -> float:
        if timeout is None:
            return self.settings.request_timeout_seconds
        return timeout + self.settings.timeout_grace_seconds

    async def call(
        self,
        target: Target,
        path: str,
        method: str = "GET",
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> CallResult:
        """Perform one HTTP call against ``target``.

        Raises UnauthenticatedError before any I/O if no key is bound, and
        HopxTransportError if the exchange fails. Non-2xx responses are
        returned, not raised.
        """
        token = current_credential()
        if token is None:
            raise UnauthenticatedError()

        method = method.upper()
        url = f"{self.base_url(target)}{path}"
        params = _drop_none(params)
        body = _drop_none(body)
        limit = self.settings.log_body_limit
        call_id = uuid.uuid4().hex[:8]

        logger.info(
            f"[{call_id}] → {method} {url} params={params or {}}\n"
            f"    Body: {format_for_log(body, limit)}"
        )

        start_time = time.time()
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self._timeout(timeout)),
            ) as client:
                response = await client.request(
                    method,
                    url,
                    params=params or None,
                    json=body,
                    headers=self._headers(target, token),
                )
        except httpx.TimeoutException as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(f"[{call_id}] ✗ {method} {url} timed out ({duration_ms:.1f}ms)")
            raise HopxTransportError("timeout", e) from e
        except httpx.TransportError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                f"[{call_id}] ✗ {method} {url} failed ({duration_ms:.1f}ms): {type(e).__name__}: {e}"
            )
            raise HopxTransportError("connection failed", e) from e
        except httpx.RequestError as e:
            # Raised while reading the response, e.g. a body that does not match its Content-Encoding.
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                f"[{call_id}] ✗ {method} {url} unreadable response ({duration_ms:.1f}ms): {type(e).__name__}: {e}"
            )
            raise HopxTransportError("request failed", e) from e

        duration_ms = (time.time() - start_time) * 1000
        payload = _parse_body(response)
        log = logger.info if response.is_success else logger.warning
        log(
            f"[{call_id}] ← {response.status_code} {method} {url} ({duration_ms:.1f}ms)\n"
            f"    Body: {format_for_log(payload, limit)}"
        )
        return CallResult(status=response.status_code, payload=payload, method=method, url=url)
