"""wanikani -- WaniKani API v2 client with a conditional, disk-backed response cache.

Every endpoint call becomes a cache lookup, a conditional HTTP request
(``If-None-Match`` / ``If-Modified-Since``), a cache update and the
envelope's ``data`` payload.  Cache failures never break the network path.

Typical use::

    from wanikani import WaniKaniAPI

    with WaniKaniAPI() as api:          # reads WANIKANI_API_KEY
        print(api.user.get()["level"])

Modules:
    api: :class:`WaniKaniAPI` / :class:`AsyncWaniKaniAPI` wiring.
    client: Sync and async request façades and the shared cache logic.
    cache: Fingerprints and the file-per-entry cache store.
    endpoints: Per-resource wrappers.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from wanikani.api import AsyncWaniKaniAPI, WaniKaniAPI  # noqa: E402

__all__ = ["AsyncWaniKaniAPI", "WaniKaniAPI", "__version__"]
