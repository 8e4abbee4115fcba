"""HOPX MCP server - Python implementation.

Exposes the HOPX sandbox API as Model Context Protocol tools. Every inbound
request is served with the caller's own HOPX API key.
"""

__version__ = "0.1.0"

from .client import (  # noqa: E402
    CONTROL_PLANE,
    CallResult,
    HopxClient,
    HopxError,
    HopxTransportError,
    InvalidArgumentError,
    Target,
    UnauthenticatedError,
)
from .config import HopxSettings, load_settings  # noqa: E402
from .credentials import (  # noqa: E402
    credential_scope,
    current_credential,
    establish,
    extract_bearer_token,
)

__all__ = [
    # Client
    "HopxClient",
    "Target",
    "CONTROL_PLANE",
    "CallResult",
    # Errors
    "HopxError",
    "InvalidArgumentError",
    "UnauthenticatedError",
    "HopxTransportError",
    # Configuration
    "HopxSettings",
    "load_settings",
    # Credentials
    "credential_scope",
    "current_credential",
    "establish",
    "extract_bearer_token",
    # Version
    "__version__",
]
