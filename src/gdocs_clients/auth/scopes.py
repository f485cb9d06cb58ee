"""
Google OAuth Scopes for gdocs-clients.

This module defines the OAuth scopes required for Google Docs and Drive access.
"""

from typing import List

# Google Docs scopes
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

# Google Drive scopes
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"

# Full Drive access is needed for listing, searching and document discovery
SCOPES = [
    DOCS_WRITE_SCOPE,
    DRIVE_SCOPE,
]


def get_scopes() -> List[str]:
    """
    Get the list of OAuth scopes requested for every client.

    Returns:
        List of OAuth scopes, in request order.
    """
    return list(SCOPES)
