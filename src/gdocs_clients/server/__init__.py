"""gdocs-clients MCP Server."""

from .main import mcp, get_server_authorizer

from . import auth_tools

__all__ = ["mcp", "get_server_authorizer", "main"]


def main():
    """Entry point for the gdocs-clients MCP server."""
    mcp.run(show_banner=False)
