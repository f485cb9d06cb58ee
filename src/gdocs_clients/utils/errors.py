"""Custom exceptions for gdocs-clients.

This module provides structured error handling with specific exception types
for the credential lifecycle. All exceptions inherit from GDocsClientsError.
"""
from typing import Optional


class GDocsClientsError(Exception):
    """Base exception for all gdocs-clients errors.

    Attributes:
        message: Human-readable error description.
        client_name: Optional client name related to the error.
    """

    def __init__(self, message: str, client_name: Optional[str] = None) -> None:
        self.message = message
        self.client_name = client_name
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including the client name."""
        if self.client_name:
            return f"{self.message} (client: {self.client_name})"
        return self.message


class ConfigError(GDocsClientsError):
    """Raised when a client secrets file is missing or malformed."""
    pass


class ConflictError(GDocsClientsError):
    """Raised when registering a client name that already exists."""
    pass


class AuthError(GDocsClientsError):
    """Raised when the authorization code exchange fails.

    Attributes:
        auth_url: The authorization URL that was presented, if any.
    """

    def __init__(
        self,
        message: str,
        client_name: Optional[str] = None,
        auth_url: Optional[str] = None,
    ) -> None:
        self.auth_url = auth_url
        super().__init__(message, client_name)


def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Authorization").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, GDocsClientsError):
        return f"{action} failed: {error.format_message()}"
    return f"{action} failed: {str(error)}"
