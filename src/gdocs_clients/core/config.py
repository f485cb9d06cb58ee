"""
Shared configuration for gdocs-clients.

This module centralizes the filesystem locations used for client secrets and
tokens. An AuthConfig is built once and handed to the credential store instead
of being read from module globals.
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..utils.constants import (
    CREDENTIALS_SUBDIR,
    DEFAULT_HOME_DIR,
    DEFAULT_SECRETS_FILENAME,
    DEFAULT_TOKEN_FILENAME,
)


class AuthConfig:
    """
    Filesystem configuration for client secrets and tokens.

    Named clients live in ``credentials_dir``; the unnamed default client uses
    ``default_secrets_path`` and ``default_token_path``.
    """

    def __init__(
        self,
        credentials_dir: str,
        default_secrets_path: str,
        default_token_path: str,
    ) -> None:
        self.credentials_dir = os.path.expanduser(credentials_dir)
        self.default_secrets_path = os.path.expanduser(default_secrets_path)
        self.default_token_path = os.path.expanduser(default_token_path)

    @classmethod
    def for_root(
        cls, root_dir: str, credentials_dir: Optional[str] = None
    ) -> "AuthConfig":
        """
        Build a configuration anchored at a single root directory.

        Args:
            root_dir: Directory holding the default credentials.json/token.json.
            credentials_dir: Directory for named clients. Defaults to
                <root_dir>/credentials.
        """
        root_dir = os.path.expanduser(root_dir)
        return cls(
            credentials_dir=credentials_dir
            or os.path.join(root_dir, CREDENTIALS_SUBDIR),
            default_secrets_path=os.path.join(root_dir, DEFAULT_SECRETS_FILENAME),
            default_token_path=os.path.join(root_dir, DEFAULT_TOKEN_FILENAME),
        )

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """
        Build a configuration from environment variables.

        GDOCS_CLIENTS_HOME sets the root directory (default ~/.gdocs-clients)
        and GOOGLE_CREDENTIALS_DIR overrides the named-client directory.
        """
        load_dotenv()
        root_dir = os.getenv("GDOCS_CLIENTS_HOME", DEFAULT_HOME_DIR)
        return cls.for_root(root_dir, os.getenv("GOOGLE_CREDENTIALS_DIR"))

    def ensure_credentials_dir(self) -> str:
        """
        Get the credentials directory path, creating it if necessary.

        Returns:
            Path to the credentials directory.
        """
        os.makedirs(self.credentials_dir, exist_ok=True)
        return self.credentials_dir

    def get_environment_summary(self) -> Dict[str, Any]:
        """Get a summary of the current configuration (excluding secrets)."""
        return {
            "credentials_dir": self.credentials_dir,
            "default_secrets_path": self.default_secrets_path,
            "default_token_path": self.default_token_path,
            "default_client_configured": os.path.exists(self.default_secrets_path),
        }

    def __repr__(self) -> str:
        return f"AuthConfig(credentials_dir={self.credentials_dir!r})"
