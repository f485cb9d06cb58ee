"""gdocs-clients - multi-client Google OAuth for Docs and Drive.

This package manages several named Google OAuth clients side by side: their
secrets and tokens on disk, and the authorization-code flow that links each
one to a Google account.
"""
from .auth import authorize, create_new_client, list_client_credentials, load_client
from .core import AuthConfig

__version__ = "0.1.0"
__all__ = [
    "AuthConfig",
    "authorize",
    "create_new_client",
    "list_client_credentials",
    "load_client",
]
