"""Unit tests for the local credential store."""

import json
import os
from datetime import datetime
from unittest.mock import patch

import pytest

from conftest import INSTALLED_SECRETS, WEB_SECRETS, read_json, write_json
from gdocs_clients.auth.credential_store import TokenRecord
from gdocs_clients.utils.constants import DEFAULT_REDIRECT_URI
from gdocs_clients.utils.errors import ConfigError, ConflictError


class TestResolveSecrets:
    """Tests for loading client secrets."""

    def test_default_client_uses_top_level_file(self, store, default_secrets):
        """Test default client uses top level file."""
        identity = store.resolve_secrets()

        assert identity.name is None
        assert identity.client_id == "installed-id.apps.googleusercontent.com"
        assert identity.client_secret == "installed-secret"
        assert identity.client_type == "installed"

    def test_named_client_file(self, store, config):
        """Test named client file."""
        write_json(
            os.path.join(config.credentials_dir, "work.credentials.json"), WEB_SECRETS
        )

        identity = store.resolve_secrets("work")

        assert identity.name == "work"
        assert identity.client_type == "web"
        assert identity.redirect_uris == ("https://example.com/oauth2callback",)

    def test_missing_file_raises_config_error(self, store):
        """Test missing file raises config error."""
        with pytest.raises(ConfigError):
            store.resolve_secrets("nobody")

    def test_file_without_installed_or_web_key(self, store, config):
        """Test file without installed or web key."""
        write_json(config.default_secrets_path, {"other": {"client_id": "x"}})

        with pytest.raises(ConfigError, match="Could not find client secrets"):
            store.resolve_secrets()

    def test_invalid_json_raises_config_error(self, store, config):
        """Test invalid json raises config error."""
        with open(config.default_secrets_path, "w") as f:
            f.write("{not json")

        with pytest.raises(ConfigError):
            store.resolve_secrets()

    def test_redirect_uri_defaults_to_localhost(self, store, config):
        """Test redirect uri defaults to localhost."""
        write_json(
            config.default_secrets_path,
            {"installed": {"client_id": "id", "client_secret": "secret"}},
        )

        identity = store.resolve_secrets()

        assert identity.redirect_uris == (DEFAULT_REDIRECT_URI,)

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "../escape", "a\x00b"])
    def test_invalid_names_rejected(self, store, name):
        """Test invalid names rejected."""
        with pytest.raises(ConfigError, match="Invalid client name"):
            store.resolve_secrets(name)


class TestTokens:
    """Tests for loading and persisting tokens."""

    def test_load_token_missing_returns_none(self, store):
        """Test load token missing returns none."""
        assert store.load_token() is None
        assert store.load_token("nobody") is None

    def test_load_token_corrupt_json_returns_none(self, store, config):
        """Test load token corrupt json returns none."""
        os.makedirs(config.credentials_dir)
        with open(os.path.join(config.credentials_dir, "work.token.json"), "w") as f:
            f.write("{corrupt")

        assert store.load_token("work") is None

    def test_load_token_without_refresh_token_returns_none(self, store, config):
        """Test load token without refresh token returns none."""
        write_json(config.default_token_path, {"type": "authorized_user"})

        assert store.load_token() is None

    def test_load_token_reads_optional_fields(self, store, config):
        """Test load token reads optional fields."""
        write_json(
            config.default_token_path,
            {
                "refresh_token": "refresh",
                "token": "access",
                "expiry": "2030-01-01T00:00:00+00:00",
            },
        )

        token = store.load_token()

        assert token.refresh_token == "refresh"
        assert token.access_token == "access"
        assert token.expiry == datetime(2030, 1, 1)

    def test_load_token_keeps_refresh_token_when_expiry_unparseable(
        self, store, config
    ):
        """Test load token keeps refresh token when expiry unparseable."""
        write_json(
            config.default_token_path, {"refresh_token": "refresh", "expiry": "soon"}
        )

        token = store.load_token()

        assert token is not None
        assert token.refresh_token == "refresh"
        assert token.expiry is None

    def test_load_token_converts_offset_expiry_to_utc(self, store, config):
        """Test load token converts offset expiry to utc."""
        write_json(
            config.default_token_path,
            {"refresh_token": "refresh", "expiry": "2030-01-01T02:00:00+02:00"},
        )

        token = store.load_token()

        assert token.expiry == datetime(2030, 1, 1, 0, 0)

    def test_load_token_accepts_zulu_expiry(self, store, config):
        """Test load token accepts zulu expiry."""
        write_json(
            config.default_token_path,
            {"refresh_token": "refresh", "expiry": "2030-01-01T00:00:00Z"},
        )

        token = store.load_token()

        assert token.expiry == datetime(2030, 1, 1, 0, 0)

    def test_persist_token_writes_normalized_record(
        self, store, default_secrets, config
    ):
        """Test persist token writes normalized record."""
        path = store.persist_token(
            TokenRecord(refresh_token="refresh", access_token="access")
        )

        assert path == config.default_token_path
        assert read_json(path) == {
            "type": "authorized_user",
            "client_id": "installed-id.apps.googleusercontent.com",
            "client_secret": "installed-secret",
            "refresh_token": "refresh",
        }

    def test_persist_token_uses_secrets_file_values(self, store, default_secrets):
        """Test persist token uses secrets file values."""
        name = store.register_new_identity("work")
        store.persist_token(TokenRecord(refresh_token="refresh"), name)

        identity = store.resolve_secrets(name)
        stored = read_json(store.get_token_path(name))

        assert stored["client_id"] == identity.client_id
        assert stored["client_secret"] == identity.client_secret

    def test_persist_token_twice_overwrites(self, store, default_secrets):
        """Test persist token twice overwrites."""
        store.persist_token(TokenRecord(refresh_token="first"))
        store.persist_token(TokenRecord(refresh_token="second"))

        with open(store.get_token_path(), "r") as f:
            content = f.read()

        assert json.loads(content)["refresh_token"] == "second"
        assert "first" not in content

    def test_persist_token_creates_directory(self, store, default_secrets, config):
        """Test persist token creates directory."""
        config.default_token_path = os.path.join(
            os.path.dirname(default_secrets), "nested", "token.json"
        )

        path = store.persist_token(TokenRecord(refresh_token="refresh"))

        assert path == config.default_token_path
        assert read_json(path)["refresh_token"] == "refresh"

    def test_persist_token_requires_refresh_token(self, store, default_secrets):
        """Test persist token requires refresh token."""
        with pytest.raises(ValueError):
            store.persist_token(TokenRecord(refresh_token=None))

    def test_persist_token_without_secrets_raises(self, store):
        """Test persist token without secrets raises."""
        with pytest.raises(ConfigError):
            store.persist_token(TokenRecord(refresh_token="refresh"), "nobody")


class TestIdentities:
    """Tests for registering and listing named clients."""

    def test_list_creates_directory(self, store, config):
        """Test list creates directory."""
        assert store.list_identities() == []
        assert os.path.isdir(config.credentials_dir)

    def test_list_returns_registered_names(self, store, default_secrets):
        """Test list returns registered names."""
        for name in ["c", "a", "b"]:
            store.register_new_identity(name)

        assert set(store.list_identities()) == {"a", "b", "c"}

    def test_list_ignores_token_files(self, store, default_secrets):
        """Test list ignores token files."""
        store.register_new_identity("a")
        store.persist_token(TokenRecord(refresh_token="refresh"), "a")

        assert store.list_identities() == ["a"]

    def test_list_skips_empty_stem(self, store, default_secrets, config):
        """Test list skips empty stem."""
        store.register_new_identity("a")
        write_json(
            os.path.join(config.credentials_dir, ".credentials.json"),
            INSTALLED_SECRETS,
        )

        assert store.list_identities() == ["a"]

    def test_register_name_with_nul_raises_config_error(self, store, default_secrets):
        """Test register name with nul raises config error."""
        with pytest.raises(ConfigError, match="Invalid client name"):
            store.register_new_identity("bad\x00name")

    def test_list_degrades_to_empty_on_os_error(self, store):
        """Test list degrades to empty on os error."""
        with patch(
            "gdocs_clients.auth.credential_store.os.listdir",
            side_effect=PermissionError("denied"),
        ):
            assert store.list_identities() == []

    def test_register_copies_default_template(self, store, default_secrets):
        """Test register copies default template."""
        name = store.register_new_identity("work")

        assert name == "work"
        assert store.identity_exists("work")
        assert read_json(store.get_secrets_path("work")) == INSTALLED_SECRETS

    def test_register_generates_unique_name(self, store, default_secrets):
        """Test register generates unique name."""
        first = store.register_new_identity()
        second = store.register_new_identity()

        assert first.startswith("client_")
        assert first != second
        assert set(store.list_identities()) == {first, second}

    def test_register_duplicate_raises_conflict(self, store, default_secrets):
        """Test register duplicate raises conflict."""
        store.register_new_identity("work")

        with pytest.raises(ConflictError, match="already exists"):
            store.register_new_identity("work")

    def test_register_without_template_raises_config_error(self, store):
        """Test register without template raises config error."""
        with pytest.raises(ConfigError, match="Could not copy default credentials"):
            store.register_new_identity("work")

        assert not store.identity_exists("work")

    def test_identity_exists_false_for_unknown(self, store):
        """Test identity exists false for unknown."""
        assert store.identity_exists("unknown") is False
