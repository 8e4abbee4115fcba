"""Request-scoped HOPX credential.

Each inbound MCP request carries its own API key. The key is bound to a
``ContextVar`` for the duration of that request so that tool handlers and the
outbound client can read it without threading it through every call. asyncio
copies the current context into each task it creates, so concurrent requests
never observe each other's key.
"""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeVar

T = TypeVar("T")

BEARER_PREFIX = "Bearer "

_current_api_key: ContextVar[str | None] = ContextVar("hopx_api_key", default=None)


def current_credential() -> str | None:
    """Return the API key bound to the current request, or None."""
    return _current_api_key.get()


@contextmanager
def credential_scope(token: str | None) -> Iterator[None]:
    """Bind ``token`` as the current credential for the body of the block."""
    reset_token = _current_api_key.set(token)
    try:
        yield
    finally:
        _current_api_key.reset(reset_token)


async def establish(token: str | None, body: Callable[[], Awaitable[T]]) -> T:
    """Run ``body`` with ``token`` bound and return its result."""
    with credential_scope(token):
        return await body()


def extract_bearer_token(header: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` value.

    The scheme match is case-sensitive. Anything else, including an empty
    token, yields None.
    """
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def mask_token(token: str | None) -> str | None:
    """Shorten a credential for logs."""
    if not token:
        return None
    return f"{token[:8]}..."
