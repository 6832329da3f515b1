"""Tests for bizledger.config."""

import os
import stat
from pathlib import Path

import pytest

from bizledger.config import (
    OWNER_ENV_VAR,
    create_default_config,
    get_config_path,
    load_config,
    load_settings,
    resolve_owner,
    save_config,
)
from bizledger.domain.errors import UnauthenticatedError


class TestConfigFile:
    """Tests for reading and writing the TOML config."""

    def test_config_path_follows_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "bizledger" / "config.toml"

    def test_default_config_round_trip(self, tmp_path: Path) -> None:
        """Should write defaults with owner and 600 permissions."""
        path = tmp_path / "config.toml"
        create_default_config(path, owner="alice")

        assert load_config(path) == {"backend": "sqlite", "log_level": "WARNING", "owner": "alice"}
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_load_settings_without_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.toml")
        assert settings["backend"] == "sqlite"
        assert "owner" not in settings

    def test_load_settings_rejects_unknown_backend(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        save_config({"backend": "postgres"}, path)

        with pytest.raises(ValueError, match="postgres"):
            load_settings(path)


class TestResolveOwner:
    """Tests for resolve_owner."""

    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(OWNER_ENV_VAR, "env-owner")
        assert resolve_owner("cli-owner", {"owner": "config-owner"}) == "cli-owner"

    def test_environment_before_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(OWNER_ENV_VAR, "env-owner")
        assert resolve_owner(None, {"owner": "config-owner"}) == "env-owner"

    def test_config_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(OWNER_ENV_VAR, raising=False)
        assert resolve_owner(None, {"owner": "config-owner"}) == "config-owner"

    def test_no_owner_is_unauthenticated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(OWNER_ENV_VAR, "  ")
        with pytest.raises(UnauthenticatedError):
            resolve_owner("", {})
