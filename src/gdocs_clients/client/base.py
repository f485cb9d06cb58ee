"""Docs and Drive service handles built from authorized credentials."""
from typing import Any, Optional

from googleapiclient.discovery import build
from google.oauth2.credentials import Credentials

from ..auth.google_auth import Authorizer, get_authorizer


class GoogleDocsClient:
    """Google Docs and Drive services bound to one OAuth client."""

    def __init__(self, credentials: Credentials) -> None:
        """Initialize the client with authorized Google API services."""
        self.creds = credentials
        self.docs_service: Any = build('docs', 'v1', credentials=self.creds)
        self.drive_service: Any = build('drive', 'v3', credentials=self.creds)

    @classmethod
    def for_client(
        cls, name: Optional[str] = None, authorizer: Optional[Authorizer] = None
    ) -> "GoogleDocsClient":
        """Authorize a named client and build its services.

        Args:
            name: Client name, or None for the default client.
            authorizer: Authorizer to use. Built from the environment if omitted.

        Returns:
            A client whose services use that client's credentials.
        """
        authorizer = authorizer or get_authorizer()
        return cls(authorizer.authorize(name))
