"""Shared test fixtures for wanikani.

Provides isolated config/cache environments, client settings pointing at a
temporary cache directory, output state management, and a CLI runner.
These fixtures are discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from wanikani.cache import CacheStore
from wanikani.models import ClientSettings
from wanikani.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the package logger after every test.

    The CLI callback binds Rich consoles (and a logging handler) to the
    streams CliRunner installs; once the test ends those streams are closed.
    """
    yield
    reset_output()
    logger = logging.getLogger("wanikani")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A cache directory that does not exist yet."""
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir: Path) -> ClientSettings:
    """Client settings with a test API key and a temporary cache directory."""
    return ClientSettings(api_key="test-api-key", cache_dir=cache_dir)


@pytest.fixture
def store(cache_dir: Path) -> CacheStore:
    """A cache store on the temporary cache directory."""
    return CacheStore(cache_dir)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears the
    WANIKANI_* environment variables, and changes into tmp_path.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("wanikani.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["WANIKANI_API_KEY", "WANIKANI_CACHE_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

