"""HTTP client module for wanikani.

Provides synchronous and asynchronous request façades that wrap :mod:`httpx`
with authentication headers, conditional revalidation against the response
cache, and error mapping.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.

Both expose a single operation, ``request(path, options, ttl, updated_after)``,
and share their cache logic through :class:`~wanikani.client.base.BaseClient`.

Example::

    from wanikani.client import SyncClient

    with SyncClient(settings) as client:
        user = client.request("user", ttl=3_600_000)
"""

from wanikani.client.async_client import AsyncClient
from wanikani.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient"]
