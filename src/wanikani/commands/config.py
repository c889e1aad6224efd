"""``wanikani config`` -- read and edit ``config.json``.

Keys use dot notation for the nested ``cache_ttl`` table.  Values are
stored as strings and left to :class:`~wanikani.models.GlobalConfig` to
coerce, so ``wanikani config set timeout 10`` stores a float and an invalid
value is rejected before anything is written.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from wanikani.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

_NULL_WORDS = ("none", "null")


def _assign(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set *dotted_key* inside the dumped config *data*.

    Raises:
        KeyError: With a user-facing message when the path does not name
            an existing scalar setting.
    """
    *parents, leaf = dotted_key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            raise KeyError(f"Invalid config key: {dotted_key}")
        node = child
    if leaf not in node or isinstance(node[leaf], dict):
        raise KeyError(f"Unknown config key: {dotted_key}")
    node[leaf] = value


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration (defaults included)."""
    from wanikani.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    format_response(load_global_config().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting to change, e.g. 'timeout' or 'cache_ttl.subjects'."),
    value: str = typer.Argument(help="New value; 'none' clears an optional setting."),
) -> None:
    """Change one setting.

    Example::

        wanikani config set api_key_source file:~/.wanikani-key
        wanikani config set cache_ttl.summary 0
    """
    from wanikani.config import load_global_config, save_global_config
    from wanikani.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    try:
        _assign(data, key, None if value.lower() in _NULL_WORDS else value)
    except KeyError as exc:
        error(exc.args[0])
        raise typer.Exit(code=2) from None

    try:
        updated = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(updated)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore every setting to its default.  Asks first unless ``--force``."""
    from wanikani.config import save_global_config
    from wanikani.models import GlobalConfig

    force = bool(ctx.obj and ctx.obj.get("force"))
    if not force and not typer.confirm("Reset all settings to their defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
