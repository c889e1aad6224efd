"""Get command -- fetch a resource through the response cache.

Provides ``wanikani get RESOURCE [ID]``.  The request goes through the
same conditional cache as the library, with the TTLs from the ``cache_ttl``
section of the global configuration.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import httpx
import typer

from wanikani.exceptions import InvalidUsageError, WaniKaniError
from wanikani.exit_codes import EXIT_CONNECTION_ERROR
from wanikani.output import debug, error, format_response

if TYPE_CHECKING:
    from wanikani.api import WaniKaniAPI

# CLI name -> WaniKaniAPI attribute
RESOURCES: dict[str, str] = {
    "user": "user",
    "summary": "summary",
    "subjects": "subjects",
    "assignments": "assignments",
    "reviews": "reviews",
    "review-statistics": "review_statistics",
    "study-materials": "study_materials",
    "resets": "resets",
    "level-progressions": "level_progressions",
    "spaced-repetition-systems": "spaced_repetition_systems",
    "voice-actors": "voice_actors",
}

_SINGLETONS = {"user", "summary"}


def build_api() -> WaniKaniAPI:
    """Create a :class:`~wanikani.api.WaniKaniAPI` from the global configuration."""
    from wanikani.api import WaniKaniAPI
    from wanikani.config import load_global_config

    return WaniKaniAPI.from_config(load_global_config())


def fetch(api: WaniKaniAPI, resource: str, id: Optional[int], updated_after: Optional[datetime]) -> Any:
    """Dispatch to the endpoint for *resource*.

    Raises:
        InvalidUsageError: For unknown resources or options the resource
            does not support.
    """
    if resource not in RESOURCES:
        raise InvalidUsageError(
            f"Unknown resource '{resource}'. Choose from: {', '.join(RESOURCES)}"
        )
    endpoint = getattr(api, RESOURCES[resource])
    if resource in _SINGLETONS:
        if id is not None or updated_after is not None:
            raise InvalidUsageError(f"'{resource}' takes neither an ID nor --updated-after")
        return endpoint.get()
    if id is not None:
        if updated_after is not None:
            raise InvalidUsageError("--updated-after only applies to collections")
        return endpoint.get(id)
    return endpoint.get_all(updated_after=updated_after)


def get_command(
    resource: str = typer.Argument(help=f"Resource: {', '.join(RESOURCES)}."),
    id: Optional[int] = typer.Argument(None, help="Fetch a single resource by ID."),
    updated_after: Optional[datetime] = typer.Option(
        None,
        "--updated-after",
        help="Only resources updated after this time (UTC when no offset is given).",
    ),
) -> None:
    """Fetch a resource and print its data.

    Example::

        wanikani get user
        wanikani get subjects 440
        wanikani get assignments --updated-after 2024-01-01
    """
    try:
        with build_api() as api:
            debug(f"Cache directory: {api.settings.cache_dir}")
            data = fetch(api, resource, id, updated_after)
    except WaniKaniError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except httpx.TransportError as exc:
        error(f"Connection failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR) from None

    format_response(data)
