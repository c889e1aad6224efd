"""Asynchronous request façade -- mirrors :class:`~wanikani.client.sync_client.SyncClient`.

:class:`AsyncClient` wraps :class:`httpx.AsyncClient` and shares the whole
request/cache core with the blocking client; only the network call is
awaited.  Cache files are small and read/written synchronously.

Concurrent calls are independent end-to-end: each prepares its own headers
and cache lookup, and the only shared state is the cache directory, where
every fingerprint has its own atomically replaced file.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import httpx

from wanikani.cache.store import CacheStore
from wanikani.client.base import BaseClient
from wanikani.models import ClientSettings, RequestOptions


class AsyncClient(BaseClient):
    """Non-blocking client for API calls.

    Args:
        settings: Injected client configuration.
        cache: Optional cache store (defaults to one on ``settings.cache_dir``).
        transport: Optional async httpx transport.

    Example::

        async with AsyncClient(settings) as client:
            user = await client.request("user", ttl=3_600_000)
    """

    def __init__(
        self,
        settings: ClientSettings,
        cache: Optional[CacheStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(settings, cache)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._http()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if open."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    async def request(
        self,
        path: str,
        options: Optional[RequestOptions] = None,
        ttl: float = 0,
        updated_after: Optional[datetime] = None,
    ) -> Any:
        """Fetch the resource at *path* and return the envelope's ``data``.

        Behaves identically to
        :meth:`~wanikani.client.sync_client.SyncClient.request` but is
        non-blocking.
        """
        call = self._prepare(path, options, ttl, updated_after)
        response = await self._http().request(
            call.method,
            call.url,
            headers=call.headers,
            content=call.body,
        )
        return self._resolve(call, response)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport, **self._client_kwargs())
        return self._client
