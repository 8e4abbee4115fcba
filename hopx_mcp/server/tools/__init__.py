"""HOPX tools. Importing this package registers every tool on the MCP server."""

from .environment import cache_clear, cache_stats, env_clear, env_get, env_set
from .execution import (
    execute_code,
    kill_process,
    list_processes,
    list_system_processes,
    run_command,
    run_command_background,
)
from .files import file_exists, file_list, file_mkdir, file_read, file_remove, file_write
from .sandboxes import (
    create_sandbox,
    delete_sandbox,
    get_sandbox,
    get_template,
    health,
    list_sandboxes,
    list_templates,
    resume_sandbox,
    update_sandbox_timeout,
)
from .vm import get_agent_url, get_preview_url, get_system_metrics, get_vm_info, ping_vm

__all__ = [
    # System
    "health",
    # Sandboxes
    "list_sandboxes",
    "create_sandbox",
    "get_sandbox",
    "delete_sandbox",
    "resume_sandbox",
    "update_sandbox_timeout",
    # Templates
    "list_templates",
    "get_template",
    # Execution
    "execute_code",
    "list_processes",
    "kill_process",
    "run_command",
    "run_command_background",
    "list_system_processes",
    # Files
    "file_read",
    "file_write",
    "file_list",
    "file_exists",
    "file_remove",
    "file_mkdir",
    # VM
    "ping_vm",
    "get_vm_info",
    "get_preview_url",
    "get_agent_url",
    "get_system_metrics",
    # Environment and cache
    "env_get",
    "env_set",
    "env_clear",
    "cache_clear",
    "cache_stats",
]
