"""Code execution, shell command and process tools (sandbox agent)."""

from typing import Annotated, Literal

from pydantic import Field

from ...client import Target
from ..registry import DEFAULT_EXEC_TIMEOUT, get_client, hopx_tool, require

ExecutionMode = Literal["isolated", "persistent", "rich", "background"]

EXECUTE_PATHS: dict[str, str] = {
    "isolated": "/v1/execute/isolated",
    "persistent": "/execute",
    "rich": "/execute/rich",
    "background": "/execute/background",
}

SandboxId = Annotated[str, Field(description="Sandbox ID")]
Timeout = Annotated[int, Field(ge=1, le=3600, description="Timeout in seconds")]
EnvVars = Annotated[dict[str, str] | None, Field(description="Environment variables for this execution")]


@hopx_tool(doing="executing code", do="execute code", success_label="Execution result:")
async def execute_code(
    sandbox_id: Annotated[str, Field(description="Sandbox ID to execute code in")],
    code: Annotated[str, Field(description="Code to execute")],
    language: Annotated[
        Literal["python", "javascript", "bash", "go"],
        Field(description="Programming language"),
    ] = "python",
    mode: Annotated[
        ExecutionMode,
        Field(
            description=(
                "'isolated' runs in a fresh process, 'persistent' keeps interpreter state between calls, "
                "'rich' captures plots and dataframes, 'background' returns a process_id immediately"
            )
        ),
    ] = "isolated",
    timeout: Timeout = DEFAULT_EXEC_TIMEOUT,
    env: EnvVars = None,
    working_dir: Annotated[str | None, Field(description="Working directory")] = None,
    name: Annotated[str | None, Field(description="Label for a background execution")] = None,
):
    """Execute code in a HOPX sandbox. Supports Python, JavaScript, Bash and Go."""
    target = Target.agent(sandbox_id)
    require(code, "code")
    return await get_client().call(
        target,
        EXECUTE_PATHS[mode],
        "POST",
        body={
            "code": code,
            "language": language,
            "timeout": timeout,
            "env": env,
            "working_dir": working_dir,
            "name": name if mode == "background" else None,
        },
        timeout=timeout,
    )


@hopx_tool(doing="listing processes", do="list processes")
async def list_processes(sandbox_id: SandboxId):
    """List background executions started in a sandbox."""
    return await get_client().call(Target.agent(sandbox_id), "/execute/processes")


@hopx_tool(doing="killing process", do="kill process")
async def kill_process(
    sandbox_id: SandboxId,
    process_id: Annotated[str, Field(description="Process ID returned by a background execution")],
):
    """Terminate a background execution."""
    target = Target.agent(sandbox_id)
    require(process_id, "process_id")
    result = await get_client().call(target, "/execute/kill", "DELETE", params={"process_id": process_id})
    if result.ok:
        return f"Process {process_id} killed."
    return result


@hopx_tool(doing="running command", do="run command", success_label="Command result:")
async def run_command(
    sandbox_id: SandboxId,
    command: Annotated[str, Field(description="Shell command to execute")],
    timeout: Timeout = DEFAULT_EXEC_TIMEOUT,
    working_dir: Annotated[str | None, Field(description="Working directory")] = None,
    env: EnvVars = None,
):
    """Run a shell command in a sandbox and wait for it to finish."""
    target = Target.agent(sandbox_id)
    require(command, "command")
    return await get_client().call(
        target,
        "/commands/run",
        "POST",
        body={"command": command, "timeout": timeout, "working_dir": working_dir, "env": env},
        timeout=timeout,
    )


@hopx_tool(doing="starting background command", do="start background command", success_label="Command started:")
async def run_command_background(
    sandbox_id: SandboxId,
    command: Annotated[str, Field(description="Shell command to execute")],
    timeout: Timeout = DEFAULT_EXEC_TIMEOUT,
    working_dir: Annotated[str | None, Field(description="Working directory")] = None,
    env: EnvVars = None,
    name: Annotated[str | None, Field(description="Label for the background process")] = None,
):
    """Start a shell command in the background and return its process ID."""
    target = Target.agent(sandbox_id)
    require(command, "command")
    return await get_client().call(
        target,
        "/commands/background",
        "POST",
        body={"command": command, "timeout": timeout, "working_dir": working_dir, "env": env, "name": name},
        timeout=timeout,
    )


@hopx_tool(doing="listing system processes", do="list system processes")
async def list_system_processes(sandbox_id: SandboxId):
    """List all processes running inside the sandbox VM."""
    return await get_client().call(Target.agent(sandbox_id), "/system/processes")
