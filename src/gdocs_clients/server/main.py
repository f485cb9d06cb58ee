"""MCP Server initialization and entry point."""

from fastmcp import FastMCP
from ..auth.google_auth import Authorizer, get_authorizer
from ..core.config import AuthConfig
from ..utils.errors import AuthError
from typing import Optional

# Initialize MCP Server
mcp = FastMCP("gdocs-clients")

# Global authorizer, initialized lazily
_authorizer: Optional[Authorizer] = None


def _no_terminal(auth_url: str) -> str:
    """stdin carries the MCP transport, so codes arrive through a tool call."""
    raise AuthError(
        "Interactive input is unavailable. "
        "Complete authorization with complete_google_client_auth.",
        auth_url=auth_url,
    )


def get_server_authorizer() -> Authorizer:
    """Get or create the global Authorizer instance.

    Returns:
        An Authorizer configured from the environment.
    """
    global _authorizer
    if not _authorizer:
        _authorizer = get_authorizer(AuthConfig.from_env(), code_source=_no_terminal)
    return _authorizer


def set_server_authorizer(authorizer: Optional[Authorizer]) -> None:
    """Replace the global Authorizer instance."""
    global _authorizer
    _authorizer = authorizer
