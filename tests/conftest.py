"""Shared fixtures for gdocs-clients tests."""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../src"))

from gdocs_clients.core.config import AuthConfig
from gdocs_clients.auth.credential_store import LocalDirectoryCredentialStore

INSTALLED_SECRETS = {
    "installed": {
        "client_id": "installed-id.apps.googleusercontent.com",
        "client_secret": "installed-secret",
        "redirect_uris": ["http://localhost:8080/callback"],
    }
}

WEB_SECRETS = {
    "web": {
        "client_id": "web-id.apps.googleusercontent.com",
        "client_secret": "web-secret",
        "redirect_uris": ["https://example.com/oauth2callback"],
    }
}


def write_json(path, data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f)


def read_json(path):
    with open(path, "r") as f:
        return json.load(f)


@pytest.fixture
def config(tmp_path):
    return AuthConfig.for_root(str(tmp_path))


@pytest.fixture
def store(config):
    return LocalDirectoryCredentialStore(config)


@pytest.fixture
def default_secrets(config):
    """Install the default credentials.json template."""
    write_json(config.default_secrets_path, INSTALLED_SECRETS)
    return config.default_secrets_path
