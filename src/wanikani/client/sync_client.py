"""Synchronous request façade with conditional caching.

This module provides :class:`SyncClient`, the blocking entry point the
endpoint classes call into.  It wraps :class:`httpx.Client` and layers the
request/cache core from :class:`~wanikani.client.base.BaseClient` on top:

- **Auth and revision headers** on every request.
- **Conditional revalidation** -- a fresh cache entry contributes
  ``If-None-Match`` / ``If-Modified-Since``; a ``304`` returns the cached
  payload.
- **Write-through caching** of ``2xx`` payloads when the TTL is positive.
- **Error mapping** of non-success statuses to typed exceptions.

There is no retry: a failed call surfaces immediately.

See Also:
    :class:`~wanikani.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import httpx

from wanikani.cache.store import CacheStore
from wanikani.client.base import BaseClient
from wanikani.models import ClientSettings, RequestOptions


class SyncClient(BaseClient):
    """Blocking client for API calls.

    The underlying :class:`httpx.Client` is created on first use and closed
    by :meth:`close` or on leaving the ``with`` block.

    Args:
        settings: Injected client configuration.
        cache: Optional cache store (defaults to one on ``settings.cache_dir``).
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with SyncClient(settings) as client:
            subjects = client.request("subjects", ttl=86_400_000)
    """

    def __init__(
        self,
        settings: ClientSettings,
        cache: Optional[CacheStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(settings, cache)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._http()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client, if open."""
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    def request(
        self,
        path: str,
        options: Optional[RequestOptions] = None,
        ttl: float = 0,
        updated_after: Optional[datetime] = None,
    ) -> Any:
        """Fetch the resource at *path* and return the envelope's ``data``.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            options: Method, extra headers and body.  Defaults to a plain GET.
            ttl: Maximum cache age in milliseconds; ``0`` bypasses the cache.
            updated_after: Only return resources modified after this time.

        Returns:
            The ``data`` field of the response envelope, or the cached
            payload on ``304 Not Modified``.

        Raises:
            InvalidUsageError: If *ttl* is negative.
            CacheInconsistencyError: On ``304`` without a cache entry.
            ResponseFormatError: If a ``2xx`` body is not a valid envelope.
            HTTPStatusError: On any other non-success status.
            httpx.TransportError: On network failures, unwrapped.
        """
        call = self._prepare(path, options, ttl, updated_after)
        response = self._http().request(
            call.method,
            call.url,
            headers=call.headers,
            content=call.body,
        )
        return self._resolve(call, response)

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(transport=self._transport, **self._client_kwargs())
        return self._client
