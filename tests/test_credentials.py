"""Tests for hopx_mcp.credentials module."""

import asyncio

from hopx_mcp.credentials import (
    credential_scope,
    current_credential,
    establish,
    extract_bearer_token,
    mask_token,
)


class TestExtractBearerToken:
    """Tests for extract_bearer_token."""

    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc123") == "abc123"

    def test_missing_header(self):
        assert extract_bearer_token(None) is None
        assert extract_bearer_token("") is None

    def test_other_scheme_is_ignored(self):
        assert extract_bearer_token("Basic dXNlcjpwYXNz") is None

    def test_scheme_is_case_sensitive(self):
        assert extract_bearer_token("bearer abc123") is None

    def test_empty_token(self):
        assert extract_bearer_token("Bearer ") is None
        assert extract_bearer_token("Bearer    ") is None


class TestMaskToken:
    """Tests for mask_token."""

    def test_keeps_prefix_only(self):
        assert mask_token("hopx_live_0123456789") == "hopx_liv..."

    def test_absent(self):
        assert mask_token(None) is None


class TestCredentialScope:
    """Tests for binding and reading the current credential."""

    def test_absent_outside_any_scope(self):
        assert current_credential() is None

    def test_scope_binds_and_restores(self):
        with credential_scope("key-1"):
            assert current_credential() == "key-1"
        assert current_credential() is None

    def test_innermost_scope_wins(self):
        with credential_scope("outer"):
            with credential_scope("inner"):
                assert current_credential() == "inner"
            assert current_credential() == "outer"

    def test_scope_restores_after_exception(self):
        try:
            with credential_scope("key-1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert current_credential() is None

    def test_scope_can_bind_absent(self):
        with credential_scope("outer"):
            with credential_scope(None):
                assert current_credential() is None


async def test_establish_returns_body_result():
    """establish should run the body with the token bound."""

    async def body():
        await asyncio.sleep(0)
        return current_credential()

    assert await establish("key-1", body) == "key-1"
    assert current_credential() is None


async def test_concurrent_requests_never_see_each_other():
    """Interleaved executions each observe only their own token."""
    observed: dict[str, list[str | None]] = {"a": [], "b": []}
    both_started = asyncio.Event()
    started = 0

    async def nested_read() -> str | None:
        await asyncio.sleep(0)
        return current_credential()

    async def handle(name: str, token: str) -> None:
        nonlocal started

        async def body():
            nonlocal started
            observed[name].append(current_credential())
            started += 1
            if started == 2:
                both_started.set()
            await both_started.wait()
            for _ in range(3):
                observed[name].append(await nested_read())
                await asyncio.sleep(0)

        await establish(token, body)

    await asyncio.gather(handle("a", "key-a"), handle("b", "key-b"))

    assert observed["a"] == ["key-a"] * 4
    assert observed["b"] == ["key-b"] * 4


async def test_child_tasks_inherit_credential():
    """Tasks spawned while serving a request see that request's token."""

    async def read_later():
        await asyncio.sleep(0)
        return current_credential()

    async def read_in_child():
        return await asyncio.create_task(read_later())

    assert await establish("key-1", read_in_child) == "key-1"
    assert await establish("key-2", read_in_child) == "key-2"
