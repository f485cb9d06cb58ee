"""
OAuth Authentication Package for gdocs-clients.

This package provides multi-client OAuth support with:
- A credential store mapping client names to secrets and token files
- The interactive authorization-code flow with a pluggable code source
"""

from .scopes import SCOPES, get_scopes
from .credential_store import (
    ClientIdentity,
    CredentialStore,
    LocalDirectoryCredentialStore,
    TokenRecord,
)
from .google_auth import (
    Authorizer,
    authorize,
    create_new_client,
    get_authorizer,
    list_client_credentials,
    load_client,
    prompt_for_code,
)

__all__ = [
    # Scopes
    "SCOPES",
    "get_scopes",
    # Credential Store
    "ClientIdentity",
    "CredentialStore",
    "LocalDirectoryCredentialStore",
    "TokenRecord",
    # Auth Functions
    "Authorizer",
    "authorize",
    "create_new_client",
    "get_authorizer",
    "list_client_credentials",
    "load_client",
    "prompt_for_code",
]
