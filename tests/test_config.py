"""Tests for restcli.config -- XDG paths, atomic writes, precedence, token file."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from restcli.config import (
    _atomic_write,
    delete_token,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    load_token,
    resolve_config,
    save_global_config,
    save_token,
    token_path,
)
from restcli.exceptions import ConfigError
from restcli.models import GlobalConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "restcli"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "restcli"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "restcli"
        assert result.is_dir()

    def test_fallback_layout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("restcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".restcli"
        assert get_data_dir() == tmp_path / ".restcli" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c.txt"
        _atomic_write(target, "x")
        assert target.read_text(encoding="utf-8") == "x"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        with patch("restcli.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_mode_applied(self, tmp_path: Path) -> None:
        target = tmp_path / "secret"
        _atomic_write(target, "s", mode=0o600)
        assert stat.S_IMODE(target.stat().st_mode) == 0o600


# ---------------------------------------------------------------------------
# Global and project config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.base_url == "https://api.example.com"

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(base_url="https://staging.example.com", timeout=5))
        loaded = load_global_config()
        assert loaded.base_url == "https://staging.example.com"
        assert loaded.timeout == 5

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"timeout": "soon"})
        with pytest.raises(ConfigError):
            load_global_config()


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_valid_project_config(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restcli.json", {"base_url": "http://localhost:8080"})
        assert load_project_config() == {"base_url": "http://localhost:8080"}

    def test_non_object_rejected(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restcli.json", ["a"])
        with pytest.raises(ConfigError, match="JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config().base_url == "https://api.example.com"

    def test_global_config_used(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(base_url="https://global.example.com"))
        assert resolve_config().base_url == "https://global.example.com"

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(base_url="https://global.example.com", timeout=7))
        _write_json(isolated_config / "restcli.json", {"base_url": "https://project.example.com"})
        config = resolve_config()
        assert config.base_url == "https://project.example.com"
        assert config.timeout == 7

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "restcli.json", {"base_url": "https://project.example.com"})
        monkeypatch.setenv("RESTCLI_BASE_URL", "https://env.example.com")
        assert resolve_config().base_url == "https://env.example.com"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESTCLI_BASE_URL", "https://env.example.com")
        assert resolve_config(cli_base_url="https://cli.example.com").base_url == (
            "https://cli.example.com"
        )

    def test_cli_format_overrides_global(self, isolated_config: Path) -> None:
        config = GlobalConfig()
        config.output.format = "json"
        save_global_config(config)
        assert resolve_config().output.format == "json"
        assert resolve_config(cli_format="plain").output.format == "plain"

    def test_invalid_project_value_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "restcli.json", {"timeout": "soon"})
        with pytest.raises(ConfigError):
            resolve_config()

    def test_resolution_not_persisted(self, isolated_config: Path) -> None:
        resolve_config(cli_base_url="https://cli.example.com")
        assert load_global_config().base_url == "https://api.example.com"


# ---------------------------------------------------------------------------
# Token file
# ---------------------------------------------------------------------------


class TestTokenFile:
    def test_no_token(self, isolated_config: Path) -> None:
        assert load_token() is None

    def test_save_and_load(self, isolated_config: Path) -> None:
        path = save_token("token_abc\n")
        assert path == token_path()
        assert load_token() == "token_abc"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_token_file_owner_only(self, isolated_config: Path) -> None:
        path = save_token("token_abc")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_token_lives_in_data_dir(self, isolated_config: Path) -> None:
        assert token_path().parent == get_data_dir()

    def test_env_wins_over_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_token("token_file")
        monkeypatch.setenv("RESTCLI_TOKEN", "token_env")
        assert load_token() == "token_env"

    def test_empty_file_means_no_token(self, isolated_config: Path) -> None:
        token_path().write_text("\n", encoding="utf-8")
        assert load_token() is None

    def test_delete(self, isolated_config: Path) -> None:
        save_token("token_abc")
        assert delete_token() is True
        assert load_token() is None
        assert delete_token() is False
