"""VM status, URL and metrics tools."""

from typing import Annotated

from pydantic import Field

from ...client import CONTROL_PLANE, Target
from ..registry import get_client, hopx_tool, segment

AGENT_PORT = 7777

SandboxId = Annotated[str, Field(description="Sandbox ID")]


@hopx_tool(doing="pinging VM", do="ping VM")
async def ping_vm(sandbox_id: SandboxId):
    """Check that the sandbox agent is reachable."""
    return await get_client().call(Target.agent(sandbox_id), "/ping")


@hopx_tool(doing="getting VM info", do="get VM info")
async def get_vm_info(sandbox_id: SandboxId):
    """Get agent version, features and resources of the sandbox VM."""
    return await get_client().call(Target.agent(sandbox_id), "/info")


@hopx_tool(doing="getting preview URL", do="get preview URL")
async def get_preview_url(
    sandbox_id: SandboxId,
    port: Annotated[int, Field(ge=1, le=65535, description="Port of a service running in the sandbox")],
):
    """Get the public URL of a service listening on a port inside the sandbox."""
    return await get_client().call(
        CONTROL_PLANE,
        f"/v1/sandboxes/{segment(sandbox_id, 'sandbox_id')}/preview",
        params={"port": port},
    )


@hopx_tool(doing="getting agent URL", do="get agent URL")
async def get_agent_url(sandbox_id: SandboxId):
    """Get the public URL of the sandbox agent."""
    return await get_client().call(
        CONTROL_PLANE,
        f"/v1/sandboxes/{segment(sandbox_id, 'sandbox_id')}/preview",
        params={"port": AGENT_PORT},
    )


@hopx_tool(doing="getting metrics", do="get metrics")
async def get_system_metrics(sandbox_id: SandboxId):
    """Get CPU, memory and disk usage of the sandbox."""
    return await get_client().call(Target.agent(sandbox_id), "/system")
