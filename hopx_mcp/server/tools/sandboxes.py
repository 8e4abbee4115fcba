"""Sandbox and template lifecycle tools (control plane)."""

from typing import Annotated, Literal

from pydantic import Field

from ...client import CONTROL_PLANE, InvalidArgumentError, UnauthenticatedError
from ...credentials import current_credential, mask_token
from ...utils import pretty_json
from ..registry import get_client, hopx_tool, segment

SandboxId = Annotated[str, Field(description="Sandbox ID")]


@hopx_tool(
    doing="checking HOPX API health",
    do="check HOPX API health",
    failure_prefix="HOPX API health check failed",
)
async def health():
    """Check health status of the HOPX API and verify authentication."""
    if current_credential() is None:
        return f"Error: {UnauthenticatedError()}"
    result = await get_client().call(CONTROL_PLANE, "/health")
    if result.ok:
        return (
            f"HOPX API Status: {pretty_json(result.payload)}\n"
            f"Authenticated: Yes (API key: {mask_token(current_credential())})"
        )
    return result


@hopx_tool(doing="listing sandboxes", do="list sandboxes")
async def list_sandboxes(
    limit: Annotated[int, Field(ge=1, le=1000, description="Maximum number of sandboxes to return")] = 100,
    status: Annotated[
        Literal["running", "stopped", "paused", "creating"] | None,
        Field(description="Filter by status"),
    ] = None,
    region: Annotated[str | None, Field(description="Filter by region, e.g. 'us-east'")] = None,
):
    """List all sandboxes for the authenticated user."""
    return await get_client().call(
        CONTROL_PLANE,
        "/v1/sandboxes",
        params={"limit": limit, "status": status, "region": region},
    )


@hopx_tool(doing="creating sandbox", do="create sandbox", success_label="Sandbox created successfully:")
async def create_sandbox(
    template_id: Annotated[str, Field(description="Template ID or name (e.g., 'code-interpreter')")],
    region: Annotated[str | None, Field(description="Deployment region, e.g. 'us-east', 'eu-west'")] = None,
    timeout_seconds: Annotated[int, Field(ge=1, description="Auto-shutdown timeout in seconds")] = 600,
    internet_access: Annotated[bool, Field(description="Enable internet access")] = True,
    env_vars: Annotated[dict[str, str] | None, Field(description="Initial environment variables")] = None,
):
    """Create a new sandbox. Use list_templates first to find available templates."""
    if not template_id.strip():
        raise InvalidArgumentError("template_id", "must not be empty")
    return await get_client().call(
        CONTROL_PLANE,
        "/v1/sandboxes",
        "POST",
        body={
            "template_id": template_id,
            "region": region,
            "timeout_seconds": timeout_seconds,
            "internet_access": internet_access,
            "env_vars": env_vars,
        },
    )


@hopx_tool(doing="getting sandbox", do="get sandbox")
async def get_sandbox(id: SandboxId):
    """Get detailed information about a sandbox."""
    return await get_client().call(CONTROL_PLANE, f"/v1/sandboxes/{segment(id, 'id')}")


@hopx_tool(doing="deleting sandbox", do="delete sandbox")
async def delete_sandbox(id: Annotated[str, Field(description="Sandbox ID to delete")]):
    """Permanently delete a sandbox."""
    result = await get_client().call(CONTROL_PLANE, f"/v1/sandboxes/{segment(id, 'id')}", "DELETE")
    if result.ok:
        return f"Sandbox {id} deleted successfully."
    return result


@hopx_tool(doing="resuming sandbox", do="resume sandbox", success_label="Sandbox resumed:")
async def resume_sandbox(id: Annotated[str, Field(description="ID of a paused sandbox")]):
    """Resume a paused sandbox."""
    return await get_client().call(CONTROL_PLANE, f"/v1/sandboxes/{segment(id, 'id')}/resume", "POST")


@hopx_tool(doing="updating sandbox timeout", do="update sandbox timeout", success_label="Sandbox timeout updated:")
async def update_sandbox_timeout(
    id: SandboxId,
    timeout_seconds: Annotated[int, Field(ge=1, description="New auto-shutdown timeout in seconds, from now")],
):
    """Extend or shorten the auto-shutdown timeout of a running sandbox."""
    return await get_client().call(
        CONTROL_PLANE,
        f"/v1/sandboxes/{segment(id, 'id')}/timeout",
        "PUT",
        body={"timeout_seconds": timeout_seconds},
    )


@hopx_tool(doing="listing templates", do="list templates")
async def list_templates(
    limit: Annotated[int, Field(ge=1, le=1000, description="Maximum number of templates to return")] = 10,
    fields: Annotated[
        str | None,
        Field(description="Comma-separated fields to include, e.g. 'id,name,description'"),
    ] = None,
):
    """List available sandbox templates."""
    return await get_client().call(CONTROL_PLANE, "/v1/templates", params={"limit": limit, "fields": fields})


@hopx_tool(doing="getting template", do="get template")
async def get_template(name: Annotated[str, Field(description="Template name, e.g. 'code-interpreter'")]):
    """Get details of a template, including its resources and available languages."""
    return await get_client().call(CONTROL_PLANE, f"/v1/templates/{segment(name, 'name')}")
