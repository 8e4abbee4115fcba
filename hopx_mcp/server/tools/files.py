"""File tools (sandbox agent)."""

from typing import Annotated

from pydantic import Field

from ...client import Target
from ..registry import WORKSPACE_ROOT, get_client, hopx_tool, require

SandboxId = Annotated[str, Field(description="Sandbox ID")]


@hopx_tool(doing="reading file", do="read file")
async def file_read(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="File path to read")],
):
    """Read a text file from the sandbox."""
    target = Target.agent(sandbox_id)
    result = await get_client().call(target, "/files/read", params={"path": require(path, "path")})
    if result.ok and isinstance(result.payload, dict) and isinstance(result.payload.get("content"), str):
        return result.payload["content"]
    return result


@hopx_tool(doing="writing file", do="write file")
async def file_write(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="Destination file path")],
    content: Annotated[str, Field(description="File content to write")],
):
    """Write a text file in the sandbox, replacing any existing content."""
    target = Target.agent(sandbox_id)
    require(path, "path")
    result = await get_client().call(target, "/files/write", "POST", body={"path": path, "content": content})
    if result.ok:
        return f"File written successfully: {path}"
    return result


@hopx_tool(doing="listing files", do="list files")
async def file_list(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="Directory path to list")] = WORKSPACE_ROOT,
):
    """List the contents of a directory in the sandbox."""
    target = Target.agent(sandbox_id)
    return await get_client().call(target, "/files/list", params={"path": require(path, "path")})


@hopx_tool(doing="checking file", do="check file")
async def file_exists(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="Path to check")],
):
    """Check whether a file or directory exists in the sandbox."""
    target = Target.agent(sandbox_id)
    return await get_client().call(target, "/files/exists", params={"path": require(path, "path")})


@hopx_tool(doing="deleting file", do="delete file")
async def file_remove(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="Path to delete")],
):
    """Delete a file or directory (recursively) in the sandbox."""
    target = Target.agent(sandbox_id)
    require(path, "path")
    result = await get_client().call(target, "/files/remove", "DELETE", body={"path": path})
    if result.ok:
        return f"File deleted successfully: {path}"
    return result


@hopx_tool(doing="creating directory", do="create directory")
async def file_mkdir(
    sandbox_id: SandboxId,
    path: Annotated[str, Field(description="Directory to create, including missing parents")],
):
    """Create a directory in the sandbox."""
    target = Target.agent(sandbox_id)
    require(path, "path")
    result = await get_client().call(target, "/files/mkdir", "POST", body={"path": path})
    if result.ok:
        return f"Directory created successfully: {path}"
    return result
