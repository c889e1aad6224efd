"""Base classes for the per-resource endpoint wrappers.

An endpoint knows its path and its TTL category and nothing else; every call
goes through the client's single ``request`` operation.  Reads are cached for
``CacheTTLConfig.ttl_for(category)`` seconds, writes are never cached.

Endpoint methods return whatever the client returns, so the same classes work
on top of :class:`~wanikani.client.SyncClient` (plain values) and
:class:`~wanikani.client.AsyncClient` (awaitables).
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Union

from wanikani.models import CacheTTLConfig, RequestOptions

if TYPE_CHECKING:
    from wanikani.client import AsyncClient, SyncClient

    Requester = Union[SyncClient, AsyncClient]


class Endpoint:
    """Common plumbing for all endpoints.

    Args:
        client: The request façade.
        ttl: Cache duration configuration; defaults to the built-in durations.
    """

    category: str = "default"

    def __init__(self, client: Requester, ttl: Optional[CacheTTLConfig] = None) -> None:
        self._client = client
        self._ttl = ttl if ttl is not None else CacheTTLConfig()

    @property
    def ttl_seconds(self) -> int:
        """Cache duration applied to reads from this endpoint."""
        return self._ttl.ttl_for(self.category)

    def _get(self, path: str, updated_after: Optional[datetime] = None) -> Any:
        return self._client.request(path, None, self.ttl_seconds * 1000, updated_after)

    def _send(self, method: str, path: str, payload: Any) -> Any:
        options = RequestOptions(method=method, body=json.dumps(payload))
        return self._client.request(path, options, 0)


class CollectionEndpoint(Endpoint):
    """An endpoint exposing ``GET /<path>`` and ``GET /<path>/<id>``."""

    path: str = ""

    def get_all(self, updated_after: Optional[datetime] = None) -> Any:
        """Fetch the first page of the collection.

        Args:
            updated_after: Only include resources modified after this time.
        """
        return self._get(self.path, updated_after)

    def get(self, id: int) -> Any:
        """Fetch a single resource by ID."""
        return self._get(f"{self.path}/{id}")
