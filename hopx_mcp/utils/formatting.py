"""Text helpers shared by logging and tool output."""

import json
from typing import Any

# Argument and body keys whose values must never reach the logs as-is.
SECRET_MAPS = frozenset({"env", "env_vars"})
BULKY_TEXT = frozenset({"content", "code"})
TEXT_PREVIEW = 80


def pretty_json(value: Any) -> str:
    """Render a payload the way tool results present it."""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def indent(text: str, spaces: int) -> str:
    """Indent each line of text by the specified number of spaces."""
    prefix = " " * spaces
    return "\n".join(prefix + line for line in text.split("\n"))


def scrub(value: Any) -> Any:
    """Return a copy of a tool argument map or HOPX body that is safe to log.

    Environment variable values are replaced by ``<redacted>`` (names are
    kept), and file contents or source code longer than ``TEXT_PREVIEW``
    characters are cut to a preview.
    """
    if not isinstance(value, dict):
        return value
    cleaned = {}
    for key, item in value.items():
        if key in SECRET_MAPS and isinstance(item, dict):
            cleaned[key] = {name: "<redacted>" for name in item}
        elif key in BULKY_TEXT and isinstance(item, str) and len(item) > TEXT_PREVIEW:
            cleaned[key] = f"{item[:TEXT_PREVIEW]}... ({len(item)} chars)"
        else:
            cleaned[key] = item
    return cleaned


def format_for_log(value: Any, max_length: int = 500) -> str:
    """Render a value for a log line, scrubbed and cut to ``max_length``."""
    if value is None:
        return "None"
    value = scrub(value)
    if isinstance(value, (dict, list)):
        formatted = json.dumps(value, indent=2, ensure_ascii=False, default=str)
    else:
        formatted = str(value)
    if len(formatted) <= max_length:
        return formatted
    return f"{formatted[:max_length]}... (truncated, {len(formatted)} chars)"
