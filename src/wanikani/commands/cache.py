"""Cache commands -- manage the on-disk response cache.

Provides the ``wanikani cache`` sub-command group.  None of these commands
needs an API key; they only touch the cache directory resolved from
``$WANIKANI_CACHE_DIR``, the global config, or the XDG default.
"""

from __future__ import annotations

from typing import Optional

import typer

from wanikani.output import info, print_table, success

cache_app = typer.Typer(no_args_is_help=True)


def _open_store():
    from wanikani.cache import CacheStore
    from wanikani.config import load_global_config, resolve_cache_dir

    config = load_global_config()
    return config, CacheStore(resolve_cache_dir(config))


@cache_app.command("info")
def cache_info() -> None:
    """Show the cache directory, entry count and size."""
    _, store = _open_store()
    stats = store.stats()
    print_table(
        ["directory", "entries", "size_bytes"],
        [[stats["directory"], str(stats["entries"]), str(stats["size_bytes"])]],
        title="Response cache",
    )


@cache_app.command("prune")
def cache_prune(
    max_age: Optional[int] = typer.Option(
        None,
        "--max-age",
        min=0,
        help="Delete entries older than this many seconds (default from config).",
    ),
) -> None:
    """Delete cache entries older than a maximum age.

    Example::

        wanikani cache prune
        wanikani cache prune --max-age 86400
    """
    config, store = _open_store()
    seconds = max_age if max_age is not None else config.prune_max_age_seconds
    removed = store.prune(seconds * 1000)
    success(f"Removed {removed} cache entr{'y' if removed == 1 else 'ies'} older than {seconds}s.")


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cache entry.  Asks for confirmation unless ``--force``."""
    force = ctx.obj.get("force", False) if ctx.obj else False
    _, store = _open_store()
    if not force:
        confirmed = typer.confirm(f"Delete all cached responses in {store.directory}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()
    removed = store.clear()
    success(f"Removed {removed} cache entr{'y' if removed == 1 else 'ies'}.")
