"""Environment variable and cache tools (sandbox agent)."""

from typing import Annotated

from pydantic import Field

from ...client import InvalidArgumentError, Target
from ..registry import get_client, hopx_tool

SandboxId = Annotated[str, Field(description="Sandbox ID")]


@hopx_tool(doing="getting environment variables", do="get environment variables", log_result=False)
async def env_get(sandbox_id: SandboxId):
    """Get the global environment variables of the sandbox."""
    return await get_client().call(Target.agent(sandbox_id), "/env")


@hopx_tool(
    doing="setting environment variables",
    do="set environment variables",
    success_label="Environment variables updated:",
    log_result=False,
)
async def env_set(
    sandbox_id: SandboxId,
    env_vars: Annotated[dict[str, str], Field(description="Variables to set")],
    merge: Annotated[
        bool,
        Field(description="Merge into the existing variables (true) or replace all of them (false)"),
    ] = True,
):
    """Set global environment variables in the sandbox."""
    target = Target.agent(sandbox_id)
    if not env_vars:
        raise InvalidArgumentError("env_vars", "must contain at least one variable")
    for key in env_vars:
        if not key or "=" in key:
            raise InvalidArgumentError("env_vars", f"invalid variable name '{key}'")
    return await get_client().call(target, "/env", "PATCH" if merge else "PUT", body={"env_vars": env_vars})


@hopx_tool(doing="clearing environment variables", do="clear environment variables")
async def env_clear(sandbox_id: SandboxId):
    """Remove all global environment variables from the sandbox."""
    result = await get_client().call(Target.agent(sandbox_id), "/env", "DELETE")
    if result.ok:
        return f"Environment variables cleared for sandbox {sandbox_id}."
    return result


@hopx_tool(doing="clearing cache", do="clear cache")
async def cache_clear(sandbox_id: SandboxId):
    """Clear the execution result cache of the sandbox agent."""
    result = await get_client().call(Target.agent(sandbox_id), "/cache/clear", "POST")
    if result.ok:
        return f"Cache cleared for sandbox {sandbox_id}."
    return result


@hopx_tool(doing="getting cache stats", do="get cache stats")
async def cache_stats(sandbox_id: SandboxId):
    """Get hit and size statistics of the sandbox agent's cache."""
    return await get_client().call(Target.agent(sandbox_id), "/cache/stats")
