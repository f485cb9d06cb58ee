"""Authentication MCP tools for gdocs-clients."""

import logging
from typing import Optional

from .main import mcp, get_server_authorizer
from ..utils.errors import GDocsClientsError, format_error

logger = logging.getLogger(__name__)


def _auth_instructions(auth_url: str, client_name: Optional[str]) -> str:
    """Format the authorization URL and next steps for the user."""
    client_display = f"'{client_name}'" if client_name else "the default client"
    message_lines = [
        f"**ACTION REQUIRED: Google Authentication Needed for {client_display}**\n",
        "**Open this URL to authorize Google Docs and Drive access:**",
        f"```\n{auth_url}\n```",
        "",
        "**Instructions:**",
        "1. Open the URL and complete authorization in your browser",
        "2. Copy the authorization code shown at the end",
        "3. Call complete_google_client_auth with that code"
        + (f" and client_name='{client_name}'" if client_name else ""),
    ]
    return "\n".join(message_lines)


@mcp.tool()
def list_google_clients() -> str:
    """
    List the named Google OAuth clients that have been registered.

    Returns:
        One client name per line, or a note that none exist yet.
    """
    names = get_server_authorizer().list_clients()
    if not names:
        return "No named clients yet. Use create_new_google_client to add one."
    return "\n".join(names)


@mcp.tool()
def create_new_google_client(client_name: Optional[str] = None) -> str:
    """
    Register a new Google OAuth client from the default credentials.json.

    Args:
        client_name: Name for the new client. A unique name is generated if omitted.

    Returns:
        Authorization URL and instructions, or error message.
    """
    authorizer = get_server_authorizer()
    try:
        name = authorizer.store.register_new_identity(client_name)
        auth_url = authorizer.begin_authorization(name)
    except GDocsClientsError as e:
        return format_error("Client creation", e)

    logger.info(f"Created client {name}")
    return f"Created client: {name}\n\n" + _auth_instructions(auth_url, name)


@mcp.tool()
def authorize_google_client(client_name: Optional[str] = None) -> str:
    """
    Check for saved credentials, starting authorization if there are none.

    Args:
        client_name: Client to authorize (default: the unnamed default client).

    Returns:
        Confirmation that saved credentials exist, or an authorization URL.
    """
    authorizer = get_server_authorizer()
    try:
        if authorizer.load_saved_credentials(client_name) is not None:
            return "Using saved credentials."
        auth_url = authorizer.begin_authorization(client_name)
    except GDocsClientsError as e:
        return format_error("Authorization", e)

    return _auth_instructions(auth_url, client_name)


@mcp.tool()
def complete_google_client_auth(
    authorization_code: str, client_name: Optional[str] = None
) -> str:
    """
    Exchange the authorization code pasted back by the user for tokens.

    Args:
        authorization_code: The code shown after granting access.
        client_name: Client the code belongs to (default: the default client).

    Returns:
        Success message, or error message.
    """
    try:
        credentials = get_server_authorizer().complete_authorization(
            authorization_code, client_name
        )
    except GDocsClientsError as e:
        return format_error("Authorization", e)

    if not credentials.refresh_token:
        return (
            "Authentication successful, but no refresh token was issued. "
            "The session will not survive a restart."
        )
    return "Authentication successful! Token stored."
