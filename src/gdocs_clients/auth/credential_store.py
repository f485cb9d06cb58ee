"""
Credential Store for gdocs-clients.

This module maps client names to the secrets and token files on disk. The
unnamed default client uses the top-level credentials.json/token.json pair;
every named client gets a ``<name>.credentials.json`` and ``<name>.token.json``
inside the credentials directory.
"""

import os
import json
import logging
import shutil
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import AuthConfig
from ..utils.constants import (
    AUTHORIZED_USER_TYPE,
    CLIENT_TYPE_INSTALLED,
    CLIENT_TYPE_WEB,
    DEFAULT_AUTH_URI,
    DEFAULT_REDIRECT_URI,
    DEFAULT_TOKEN_URI,
    GENERATED_NAME_PREFIX,
    SECRETS_SUFFIX,
    TOKEN_SUFFIX,
)
from ..utils.errors import ConfigError, ConflictError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientIdentity:
    """OAuth client secrets loaded from a secrets file."""

    name: Optional[str]
    client_id: str
    client_secret: str
    redirect_uris: Tuple[str, ...]
    client_type: str = CLIENT_TYPE_INSTALLED
    auth_uri: str = DEFAULT_AUTH_URI
    token_uri: str = DEFAULT_TOKEN_URI

    def to_client_config(self, redirect_uri: str) -> Dict[str, Any]:
        """Build the client config dict expected by google_auth_oauthlib."""
        return {
            self.client_type: {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [redirect_uri],
            }
        }


@dataclass
class TokenRecord:
    """Tokens granted for a client identity."""

    refresh_token: Optional[str]
    access_token: Optional[str] = None
    expiry: Optional[datetime] = None


def _parse_expiry(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp or epoch milliseconds into a naive UTC datetime."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        expiry = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return expiry.replace(tzinfo=None)
    text = str(value)
    # fromisoformat only accepts a trailing Z from Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    expiry = datetime.fromisoformat(text)
    # google-auth compares against naive UTC datetimes
    if expiry.tzinfo is not None:
        expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
    return expiry


class CredentialStore(ABC):
    """Abstract base class for client secrets and token storage."""

    @abstractmethod
    def resolve_secrets(self, name: Optional[str] = None) -> ClientIdentity:
        """Load the client secrets for a client name."""
        pass

    @abstractmethod
    def load_token(self, name: Optional[str] = None) -> Optional[TokenRecord]:
        """Load the saved token for a client name, or None if there is none."""
        pass

    @abstractmethod
    def persist_token(self, token: TokenRecord, name: Optional[str] = None) -> str:
        """Store a token for a client name."""
        pass

    @abstractmethod
    def identity_exists(self, name: str) -> bool:
        """Check whether a named client has a secrets file."""
        pass

    @abstractmethod
    def list_identities(self) -> List[str]:
        """List all named clients."""
        pass

    @abstractmethod
    def register_new_identity(self, name: Optional[str] = None) -> str:
        """Register a new named client from the default secrets template."""
        pass


class LocalDirectoryCredentialStore(CredentialStore):
    """Credential store that uses local JSON files for storage."""

    def __init__(self, config: AuthConfig) -> None:
        """
        Initialize the local credential store.

        Args:
            config: Filesystem locations for secrets and tokens.
        """
        self.config = config
        logger.debug(f"LocalDirectoryCredentialStore initialized: {config}")

    def _validate_name(self, name: str) -> None:
        """Reject names that would not map to a single file stem."""
        if (
            not name
            or name in (".", "..")
            or "\x00" in name
            or "/" in name
            or os.sep in name
            or (os.altsep is not None and os.altsep in name)
        ):
            raise ConfigError(f"Invalid client name {name!r}")

    def get_secrets_path(self, name: Optional[str] = None) -> str:
        """Get the file path for a client's secrets."""
        if name is None:
            return self.config.default_secrets_path
        self._validate_name(name)
        return os.path.join(self.config.credentials_dir, f"{name}{SECRETS_SUFFIX}")

    def get_token_path(self, name: Optional[str] = None) -> str:
        """Get the file path for a client's token."""
        if name is None:
            return self.config.default_token_path
        self._validate_name(name)
        return os.path.join(self.config.credentials_dir, f"{name}{TOKEN_SUFFIX}")

    def resolve_secrets(self, name: Optional[str] = None) -> ClientIdentity:
        """Load client secrets from the client's secrets file."""
        secrets_path = self.get_secrets_path(name)

        try:
            with open(secrets_path, "r") as f:
                keys = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Client secrets file not found at {secrets_path}", name)
        except (IOError, json.JSONDecodeError) as e:
            raise ConfigError(
                f"Could not read client secrets from {secrets_path}: {e}", name
            )

        if not isinstance(keys, dict):
            raise ConfigError(f"Could not find client secrets in {secrets_path}", name)

        key = keys.get(CLIENT_TYPE_INSTALLED) or keys.get(CLIENT_TYPE_WEB)
        if not isinstance(key, dict):
            raise ConfigError(f"Could not find client secrets in {secrets_path}", name)

        return ClientIdentity(
            name=name,
            client_id=key.get("client_id"),
            client_secret=key.get("client_secret"),
            redirect_uris=tuple(key.get("redirect_uris") or [DEFAULT_REDIRECT_URI]),
            client_type=(
                CLIENT_TYPE_WEB if CLIENT_TYPE_WEB in keys else CLIENT_TYPE_INSTALLED
            ),
            auth_uri=key.get("auth_uri") or DEFAULT_AUTH_URI,
            token_uri=key.get("token_uri") or DEFAULT_TOKEN_URI,
        )

    def load_token(self, name: Optional[str] = None) -> Optional[TokenRecord]:
        """Load a token from the client's token file."""
        token_path = self.get_token_path(name)

        if not os.path.exists(token_path):
            logger.debug(f"No token file found at {token_path}")
            return None

        try:
            with open(token_path, "r") as f:
                token_data = json.load(f)

            refresh_token = token_data.get("refresh_token")
            if not refresh_token:
                logger.warning(f"Token file {token_path} has no refresh token")
                return None

        except (
            IOError, UnicodeDecodeError, json.JSONDecodeError, AttributeError
        ) as e:
            logger.warning(f"Ignoring unreadable token file {token_path}: {e}")
            return None

        expiry = None
        try:
            expiry = _parse_expiry(
                token_data.get("expiry") or token_data.get("expiry_date")
            )
        except (ValueError, TypeError, OverflowError, OSError) as e:
            logger.warning(f"Could not parse expiry in {token_path}: {e}")

        return TokenRecord(
            refresh_token=refresh_token,
            access_token=token_data.get("access_token") or token_data.get("token"),
            expiry=expiry,
        )

    def persist_token(self, token: TokenRecord, name: Optional[str] = None) -> str:
        """Store a token to the client's token file, returning its path."""
        if not token.refresh_token:
            raise ValueError("Cannot persist a token without a refresh token")

        identity = self.resolve_secrets(name)
        token_path = self.get_token_path(name)

        payload = {
            "type": AUTHORIZED_USER_TYPE,
            "client_id": identity.client_id,
            "client_secret": identity.client_secret,
            "refresh_token": token.refresh_token,
        }

        token_dir = os.path.dirname(token_path)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        with open(token_path, "w") as f:
            json.dump(payload, f, indent=2)

        logger.info(f"Token stored to {token_path}")
        return token_path

    def identity_exists(self, name: str) -> bool:
        """Check whether a named client has a secrets file."""
        return os.path.isfile(self.get_secrets_path(name))

    def list_identities(self) -> List[str]:
        """List all named clients with a secrets file."""
        names = set()
        try:
            self.config.ensure_credentials_dir()
            for filename in os.listdir(self.config.credentials_dir):
                stem = filename[: -len(SECRETS_SUFFIX)]
                if filename.endswith(SECRETS_SUFFIX) and stem:
                    names.add(stem)
        except OSError as e:
            logger.error(f"Error listing client credentials: {e}")
            return []

        logger.debug(f"Found {len(names)} named clients")
        return sorted(names)

    def register_new_identity(self, name: Optional[str] = None) -> str:
        """Copy the default secrets template to a new client name."""
        if name is None:
            name = f"{GENERATED_NAME_PREFIX}{uuid.uuid4()}"

        secrets_path = self.get_secrets_path(name)
        if self.identity_exists(name):
            raise ConflictError(
                f"Credentials file {name} already exists. "
                "Please choose a different name.",
                name,
            )

        template_path = self.config.default_secrets_path
        if not os.path.isfile(template_path):
            raise ConfigError(
                f"Could not copy default credentials. Make sure {template_path} exists."
            )

        self.config.ensure_credentials_dir()
        shutil.copyfile(template_path, secrets_path)
        logger.info(f"Copied default credentials to {secrets_path}")
        return name
