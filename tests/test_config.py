"""Tests for configuration management, paths and credential resolution."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from wanikani.config import (
    atomic_write,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    load_global_config,
    resolve_api_key,
    resolve_cache_dir,
    resolve_credential,
    save_global_config,
)
from wanikani.exceptions import ConfigError
from wanikani.models import CacheTTLConfig, GlobalConfig


class _TTY(io.StringIO):
    def isatty(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# XDG directories
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_xdg_paths(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "wanikani"
        assert get_cache_dir() == isolated_config / "xdg-cache" / "wanikani"
        assert get_data_dir() == isolated_config / "data" / "wanikani"
        assert get_config_dir().is_dir()

    def test_fallback_on_non_xdg_platform(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("wanikani.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".wanikani"
        assert get_cache_dir() == tmp_path / ".wanikani" / "cache"


class TestResolveCacheDir:
    def test_env_var_wins(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WANIKANI_CACHE_DIR", str(isolated_config / "env-cache"))
        config = GlobalConfig(cache_dir=str(isolated_config / "config-cache"))
        assert resolve_cache_dir(config) == isolated_config / "env-cache"

    def test_config_over_default(self, isolated_config: Path) -> None:
        config = GlobalConfig(cache_dir=str(isolated_config / "config-cache"))
        assert resolve_cache_dir(config) == isolated_config / "config-cache"

    def test_xdg_default(self, isolated_config: Path) -> None:
        assert resolve_cache_dir() == isolated_config / "xdg-cache" / "wanikani"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        atomic_write(target, '{"a": 1}')
        assert json.loads(target.read_text()) == {"a": 1}

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfigFile:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_save_and_load(self, isolated_config: Path) -> None:
        config = GlobalConfig(timeout=5.0, cache_ttl=CacheTTLConfig(summary=0))
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text(json.dumps({"cache_ttl": {"user": -5}}))
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_WK_KEY", "abc")
        assert resolve_credential("env:MY_WK_KEY") == "abc"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_WK_KEY", raising=False)
        with pytest.raises(ConfigError, match="MY_WK_KEY"):
            resolve_credential("env:MY_WK_KEY")

    def test_file(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key"
        key_file.write_text("  file-key\n")
        assert resolve_credential(f"file:{key_file}") == "file-key"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'absent'}")

    def test_file_empty(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key"
        key_file.write_text("\n")
        with pytest.raises(ConfigError, match="empty"):
            resolve_credential(f"file:{key_file}")

    def test_prompt_without_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO())
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_prompt_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", _TTY())
        monkeypatch.setattr("wanikani.config.getpass.getpass", lambda prompt: "typed-key")
        assert resolve_credential("prompt") == "typed-key"

    def test_unknown_source(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("keychain:wanikani")


class TestResolveApiKey:
    def test_explicit_key(self, isolated_config: Path) -> None:
        assert resolve_api_key("explicit") == "explicit"

    def test_env_fallback(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WANIKANI_API_KEY", "from-env")
        assert resolve_api_key() == "from-env"

    def test_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="WANIKANI_API_KEY"):
            resolve_api_key()

    def test_empty_string(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_api_key("")
