"""User configuration: directories, the global config file and API key sources.

Directories follow the XDG Base Directory layout on Linux and the BSDs and
fall back to a single ``~/.wanikani/`` tree elsewhere:

=========  ================================  ======================
kind       XDG                               fallback
=========  ================================  ======================
config     ``$XDG_CONFIG_HOME/wanikani``     ``~/.wanikani``
cache      ``$XDG_CACHE_HOME/wanikani``      ``~/.wanikani/cache``
data       ``$XDG_DATA_HOME/wanikani``       ``~/.wanikani``
=========  ================================  ======================

The global :class:`~wanikani.models.GlobalConfig` lives in
``<config>/config.json``.  The API key is never stored there; the config only
names where to find it (:func:`resolve_credential`).

Nothing in the request/cache core imports this module.  It builds the
values that :class:`~wanikani.api.WaniKaniAPI` injects as
:class:`~wanikani.models.ClientSettings`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from wanikani.exceptions import ConfigError
from wanikani.models import GlobalConfig

_APP_NAME = "wanikani"
_CONFIG_FILENAME = "config.json"

API_KEY_ENV_VAR = "WANIKANI_API_KEY"
CACHE_DIR_ENV_VAR = "WANIKANI_CACHE_DIR"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.wanikani)
_DIR_LAYOUT: dict[str, tuple[str, tuple[str, ...], Optional[str]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "cache": ("XDG_CACHE_HOME", (".cache",), "cache"),
    "data": ("XDG_DATA_HOME", (".local", "share"), None),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    """Return (and create) the application directory of the given *kind*."""
    env_var, home_segments, fallback_sub = _DIR_LAYOUT[kind]
    if _is_xdg_platform():
        root = os.environ.get(env_var) or str(Path.home().joinpath(*home_segments))
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Default response cache directory.  Its contents may be deleted at any time."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    """Directory for crash logs."""
    return _app_dir("data")


def resolve_cache_dir(config: Optional[GlobalConfig] = None) -> Path:
    """Pick the cache directory: ``$WANIKANI_CACHE_DIR``, then ``config.cache_dir``, then XDG.

    An explicit directory is returned as-is without being created; the cache
    store creates it on the first write.
    """
    override = os.environ.get(CACHE_DIR_ENV_VAR) or (config.cache_dir if config else None)
    if override:
        return Path(override).expanduser()
    return get_cache_dir()


# --- Atomic writes ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers see either the old or the new file.

    The content goes to a hidden temporary file next to *path*, is fsynced,
    and is then renamed over the target.  The temporary file is removed if
    anything fails.  Concurrent writers of the same path resolve to
    last-writer-wins.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json``, or return the defaults when there is none.

    Raises:
        ConfigError: If the file is not JSON or does not validate.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    atomic_write(_global_config_path(), json.dumps(config.model_dump(mode="json"), indent=2) + "\n")


# --- API key ---


def resolve_credential(source: str) -> str:
    """Read the API key from the place *source* names.

    ``env:NAME``
        The environment variable ``NAME``.
    ``file:PATH``
        The first non-blank content of ``PATH`` (``~`` is expanded).
    ``prompt``
        Ask on the terminal without echo.  Needs an interactive stdin.

    Raises:
        ConfigError: For unknown sources or when no key can be obtained.
    """
    kind, _, target = source.partition(":")

    if kind == "env" and target:
        value = os.environ.get(target)
        if not value:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return value

    if kind == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            value = path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc
        if not value:
            raise ConfigError(f"Credential file is empty: {path}")
        return value

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for the API key: stdin is not a TTY")
        return getpass.getpass("WaniKani API key: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_api_key(api_key: Optional[str] = None) -> str:
    """Return *api_key*, or ``$WANIKANI_API_KEY`` when it is ``None``.

    Raises:
        ConfigError: If the result is empty.
    """
    resolved = api_key if api_key is not None else os.environ.get(API_KEY_ENV_VAR)
    if not resolved:
        raise ConfigError(
            f"WaniKani API key is required: set the {API_KEY_ENV_VAR} environment "
            "variable or pass it to the client."
        )
    return resolved
