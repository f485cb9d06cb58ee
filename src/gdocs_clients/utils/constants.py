"""Centralized constants for gdocs-clients."""

# File naming
SECRETS_SUFFIX = ".credentials.json"
TOKEN_SUFFIX = ".token.json"
DEFAULT_SECRETS_FILENAME = "credentials.json"
DEFAULT_TOKEN_FILENAME = "token.json"
GENERATED_NAME_PREFIX = "client_"

# Client types as declared by the top-level key of a secrets file
CLIENT_TYPE_INSTALLED = "installed"
CLIENT_TYPE_WEB = "web"

# Redirect URIs
DEFAULT_REDIRECT_URI = "http://localhost:3000/"
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

# Google OAuth endpoints
DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Stored token type
AUTHORIZED_USER_TYPE = "authorized_user"

# Default locations
DEFAULT_HOME_DIR = "~/.gdocs-clients"
CREDENTIALS_SUBDIR = "credentials"
