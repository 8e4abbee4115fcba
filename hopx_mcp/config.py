"""Configuration for the HOPX API client.

Settings are read from the environment (and a local ``.env`` file) once at
startup and are immutable afterwards.
"""

import os
from typing import Annotated, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_API_BASE_URL = "https://api.hopx.ai"
DEFAULT_AGENT_DOMAIN = "hopx.dev"


def _get_int_env(name: str, default: int) -> int:
    """Parse an int env var, falling back to default on errors."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class HopxSettings(BaseModel):
    """Where and how to reach the HOPX API."""

    api_base_url: Annotated[
        str,
        Field(description="Base URL of the control plane (sandbox and template lifecycle)"),
    ] = DEFAULT_API_BASE_URL

    agent_domain: Annotated[
        str,
        Field(description="Domain under which each sandbox agent is reachable as <sandbox_id>.<domain>"),
    ] = DEFAULT_AGENT_DOMAIN

    control_plane_auth: Annotated[
        Literal["bearer", "api-key"],
        Field(
            description=(
                "How the credential is sent to the control plane: "
                "'bearer' (Authorization: Bearer) or 'api-key' (X-API-Key)"
            )
        ),
    ] = "bearer"

    request_timeout_seconds: Annotated[
        float,
        Field(gt=0, description="Client-side timeout for calls without an operation timeout"),
    ] = 30.0

    timeout_grace_seconds: Annotated[
        float,
        Field(ge=0, description="Added to an operation timeout to get the client-side timeout"),
    ] = 5.0

    log_body_limit: Annotated[
        int,
        Field(ge=0, description="Maximum number of body characters written to the log per call"),
    ] = 500

    @field_validator("api_base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        if not isinstance(v, str) or not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid API base URL '{v}': must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("agent_domain", mode="before")
    @classmethod
    def validate_agent_domain(cls, v: str) -> str:
        """Agent domains are bare host names."""
        if not isinstance(v, str) or not v:
            raise ValueError("Agent domain cannot be empty")
        if "://" in v or "/" in v:
            raise ValueError(f"Invalid agent domain '{v}': must not contain protocols or paths")
        if "." not in v or v.startswith(".") or v.endswith("."):
            raise ValueError(f"Invalid agent domain '{v}': must be a valid domain (e.g., 'hopx.dev')")
        return v.lower()

    model_config = {"extra": "forbid", "frozen": True}


def load_settings() -> HopxSettings:
    """Build settings from HOPX_* environment variables."""
    load_dotenv()

    values: dict = {
        "request_timeout_seconds": _get_int_env("HOPX_REQUEST_TIMEOUT", 30),
        "timeout_grace_seconds": _get_int_env("HOPX_TIMEOUT_GRACE", 5),
        "log_body_limit": _get_int_env("HOPX_LOG_BODY_LIMIT", 500),
    }
    base_url = os.getenv("HOPX_API_BASE_URL")
    if base_url:
        values["api_base_url"] = base_url
    agent_domain = os.getenv("HOPX_AGENT_DOMAIN")
    if agent_domain:
        values["agent_domain"] = agent_domain
    auth = os.getenv("HOPX_CONTROL_PLANE_AUTH")
    if auth:
        values["control_plane_auth"] = auth.strip().lower()

    return HopxSettings(**values)
