"""
Core Google OAuth Logic for gdocs-clients.

This module runs the authorization-code flow for a named client: it prefers a
saved token, otherwise presents an authorization URL, waits for the operator to
paste back the code, exchanges it and stores the refresh token.
"""

import logging
import os
import sys
from typing import Callable, Dict, List, Optional, Tuple

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error
from requests.exceptions import RequestException

from ..core.config import AuthConfig
from ..utils.constants import CLIENT_TYPE_WEB, OOB_REDIRECT_URI
from ..utils.errors import AuthError
from .credential_store import (
    ClientIdentity,
    CredentialStore,
    LocalDirectoryCredentialStore,
    TokenRecord,
)
from .scopes import get_scopes

logger = logging.getLogger(__name__)

CodeSource = Callable[[str], str]


def prompt_for_code(auth_url: str) -> str:
    """
    Show the authorization URL on stderr and read the pasted code from stdin.

    Blocks until a line is entered. EOF or Ctrl-C end the wait.
    """
    sys.stderr.write(f"Authorize this app by visiting this url: {auth_url}\n")
    sys.stderr.write("Enter the code from that page here: ")
    sys.stderr.flush()
    return input()


def select_redirect_uri(identity: ClientIdentity) -> str:
    """Web clients use their declared redirect URI; installed apps use OOB."""
    if identity.client_type == CLIENT_TYPE_WEB:
        return identity.redirect_uris[0]
    return OOB_REDIRECT_URI


class Authorizer:
    """Produces authorized credentials for named OAuth clients."""

    def __init__(
        self,
        store: CredentialStore,
        code_source: CodeSource = prompt_for_code,
        scopes: Optional[List[str]] = None,
    ) -> None:
        self.store = store
        self.code_source = code_source
        self.scopes = scopes or get_scopes()
        self._pending: Dict[Optional[str], Tuple[Flow, str]] = {}

    def load_saved_credentials(
        self, name: Optional[str] = None
    ) -> Optional[Credentials]:
        """
        Build credentials from a saved token, if one exists.

        Args:
            name: Client name, or None for the default client.

        Returns:
            Credentials bound to the client's secrets, or None if no token is saved.
        """
        token = self.store.load_token(name)
        if token is None:
            return None

        identity = self.store.resolve_secrets(name)
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=identity.token_uri,
            client_id=identity.client_id,
            client_secret=identity.client_secret,
            scopes=self.scopes,
            expiry=token.expiry,
        )

    def begin_authorization(self, name: Optional[str] = None) -> str:
        """
        Start the interactive flow and return the authorization URL.

        The flow is remembered until complete_authorization is called for the
        same client name.
        """
        identity = self.store.resolve_secrets(name)
        redirect_uri = select_redirect_uri(identity)
        logger.debug(
            f"Using redirect URI {redirect_uri} for {identity.client_type} client"
        )

        # Google may return the granted scopes in a different order
        os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

        flow = Flow.from_client_config(
            identity.to_client_config(redirect_uri),
            scopes=self.scopes,
            redirect_uri=redirect_uri,
            autogenerate_code_verifier=True,
        )
        auth_url, _ = flow.authorization_url(access_type="offline")

        self._pending[name] = (flow, auth_url)
        logger.info(f"Authorization started for {name or 'default client'}")
        return auth_url

    def complete_authorization(
        self, code: str, name: Optional[str] = None
    ) -> Credentials:
        """
        Exchange an authorization code for tokens.

        Args:
            code: The code pasted back by the operator.
            name: Client name, or None for the default client.

        Returns:
            Credentials holding the newly granted tokens.

        Raises:
            AuthError: If no flow is pending or the exchange fails.
        """
        pending = self._pending.pop(name, None)
        if pending is None:
            raise AuthError("No authorization in progress", name)
        flow, auth_url = pending

        code = (code or "").strip()
        if not code:
            raise AuthError("No authorization code entered", name, auth_url)

        try:
            flow.fetch_token(code=code)
        except (OAuth2Error, RequestException, ValueError) as e:
            logger.error(f"Error retrieving access token: {e}")
            raise AuthError("Authentication failed", name, auth_url) from e

        credentials = flow.credentials
        if credentials.refresh_token:
            self.store.persist_token(
                TokenRecord(
                    refresh_token=credentials.refresh_token,
                    access_token=credentials.token,
                    expiry=credentials.expiry,
                ),
                name,
            )
        else:
            logger.warning("Did not receive refresh token. Token might expire.")

        logger.info("Authentication successful!")
        return credentials

    def authenticate(self, name: Optional[str] = None) -> Credentials:
        """Run the interactive flow, ignoring any saved token."""
        auth_url = self.begin_authorization(name)
        code = None
        try:
            code = self.code_source(auth_url)
        except EOFError as e:
            raise AuthError("No authorization code entered", name, auth_url) from e
        finally:
            if code is None:
                self._pending.pop(name, None)
        return self.complete_authorization(code, name)

    def authorize(self, name: Optional[str] = None) -> Credentials:
        """
        Get credentials for a client, preferring a saved token.

        Args:
            name: Client name, or None for the default client.

        Returns:
            Authorized credentials.
        """
        credentials = self.load_saved_credentials(name)
        if credentials is not None:
            logger.info("Using saved credentials.")
            return credentials

        logger.info("Starting authentication flow...")
        return self.authenticate(name)

    def create_new_client(self, name: Optional[str] = None) -> Tuple[Credentials, str]:
        """
        Register a new named client and run the interactive flow for it.

        Args:
            name: Client name. A unique name is generated if omitted.

        Returns:
            Tuple of (credentials, client name).
        """
        name = self.store.register_new_identity(name)
        logger.info(f"Creating new client with credentials file: {name}")
        return self.authenticate(name), name

    def list_clients(self) -> List[str]:
        """List the names of all registered clients."""
        return self.store.list_identities()

    def load_client(self, name: str) -> Credentials:
        """Get credentials for a specific named client."""
        return self.authorize(name)


def get_authorizer(
    config: Optional[AuthConfig] = None, code_source: CodeSource = prompt_for_code
) -> Authorizer:
    """Build an Authorizer backed by local files."""
    store = LocalDirectoryCredentialStore(config or AuthConfig.from_env())
    return Authorizer(store, code_source=code_source)


# Convenience functions using the environment configuration
def authorize(
    name: Optional[str] = None, authorizer: Optional[Authorizer] = None
) -> Credentials:
    """Get credentials for a client, preferring a saved token."""
    return (authorizer or get_authorizer()).authorize(name)


def create_new_client(
    name: Optional[str] = None, authorizer: Optional[Authorizer] = None
) -> Tuple[Credentials, str]:
    """Register a new named client and authorize it."""
    return (authorizer or get_authorizer()).create_new_client(name)


def list_client_credentials(authorizer: Optional[Authorizer] = None) -> List[str]:
    """List the names of all registered clients."""
    return (authorizer or get_authorizer()).list_clients()


def load_client(name: str, authorizer: Optional[Authorizer] = None) -> Credentials:
    """Get credentials for a specific named client."""
    return (authorizer or get_authorizer()).load_client(name)
