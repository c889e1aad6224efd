"""Conditional request executor shared by the sync and async clients.

:class:`BaseClient` holds everything about a call except the network I/O
itself, so that :class:`~wanikani.client.sync_client.SyncClient` and
:class:`~wanikani.client.async_client.AsyncClient` differ only in how they
send the request.  A call goes through two steps:

1. :meth:`BaseClient._prepare` -- build the URL and headers, compute the
   fingerprint, and (when the TTL is positive) look up the cache and attach
   ``If-None-Match`` / ``If-Modified-Since`` for a fresh entry.  With a TTL
   of zero the cache is neither read nor written.
2. :meth:`BaseClient._resolve` -- reconcile the response: ``304`` returns
   the cached payload without touching the file, ``2xx`` validates the
   envelope and writes the payload back, anything else raises a
   :class:`~wanikani.exceptions.HTTPStatusError`.

The network call is always made, even on a cache hit.  Cache write failures
are logged and never fail the call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from wanikani.cache.fingerprint import fingerprint, string_headers
from wanikani.cache.store import CacheStore, LookupStatus
from wanikani.exceptions import (
    AuthError,
    CacheInconsistencyError,
    HTTPStatusError,
    InvalidUsageError,
    NotFoundError,
    RateLimitError,
    ResponseFormatError,
    ServerError,
)
from wanikani.models import CacheEntry, ClientSettings, Envelope, RequestOptions

logger = logging.getLogger(__name__)


@dataclass
class PreparedCall:
    """A request ready to be sent, plus the cache state it was prepared against."""

    method: str
    url: httpx.URL
    headers: dict[str, str]
    body: Optional[str]
    key: str
    ttl: float
    cached: Optional[CacheEntry] = None


class BaseClient:
    """Request/cache core; subclasses add the transport.

    Args:
        settings: API key, base URL, API revision, cache directory and
            timeout.
        cache: Cache store to use.  Defaults to a
            :class:`~wanikani.cache.CacheStore` on ``settings.cache_dir``.
    """

    def __init__(self, settings: ClientSettings, cache: Optional[CacheStore] = None) -> None:
        self._settings = settings
        self._cache = cache if cache is not None else CacheStore(settings.cache_dir)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def cache(self) -> CacheStore:
        return self._cache

    # ------------------------------------------------------------------ #
    # Request preparation
    # ------------------------------------------------------------------ #

    def _client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the underlying httpx client."""
        kwargs: dict[str, Any] = {"follow_redirects": True}
        # Leaving ``timeout`` out keeps httpx's default; passing None would
        # disable timeouts altogether.
        if self._settings.timeout is not None:
            kwargs["timeout"] = self._settings.timeout
        return kwargs

    def _prepare(
        self,
        path: str,
        options: Optional[RequestOptions],
        ttl: float,
        updated_after: Optional[datetime],
    ) -> PreparedCall:
        if ttl < 0:
            raise InvalidUsageError(f"Cache TTL must be non-negative, got {ttl}")
        options = options or RequestOptions()
        url = self.build_url(path, updated_after)
        headers = self.prepare_headers(options)
        key = fingerprint(url, options, self._settings.api_key.get_secret_value())
        call = PreparedCall(
            method=(options.method or "GET").upper(),
            url=url,
            headers=headers,
            body=options.body,
            key=key,
            ttl=ttl,
        )

        if ttl > 0:
            result = self._cache.lookup(key, ttl)
            logger.debug("Cache %s: %s %s", result.status.value, call.method, url.path)
            if result.status is LookupStatus.CORRUPT:
                logger.debug("Corrupt cache entry %s ignored: %s", key, result.reason)
            if result.entry is not None:
                call.cached = result.entry
                add_conditional_headers(headers, result.entry)
        return call

    def build_url(self, path: str, updated_after: Optional[datetime] = None) -> httpx.URL:
        """Join *path* onto the base URL and add the ``updated_after`` filter.

        A leading ``/`` is relative to the base URL, so ``"/subjects"`` and
        ``"subjects"`` address the same resource.  Absolute URLs (such as a
        collection's ``pages.next_url``) are used as-is.
        """
        base = httpx.URL(self._settings.base_url)
        if path.startswith(("http://", "https://")):
            url = httpx.URL(path)
        else:
            url = base.join(path.lstrip("/"))
        if updated_after is not None:
            url = url.copy_set_param("updated_after", format_timestamp(updated_after))
        return url

    def prepare_headers(self, options: RequestOptions) -> dict[str, str]:
        """Authentication, revision and content-type headers, with string-valued caller headers on top."""
        headers = {
            "Authorization": f"Bearer {self._settings.api_key.get_secret_value()}",
            "Content-Type": "application/json",
            "Wanikani-Revision": self._settings.api_revision,
        }
        headers.update(string_headers(options.headers))
        return headers

    # ------------------------------------------------------------------ #
    # Response resolution
    # ------------------------------------------------------------------ #

    def _resolve(self, call: PreparedCall, response: httpx.Response) -> Any:
        if response.status_code == httpx.codes.NOT_MODIFIED:
            if call.cached is None:
                raise CacheInconsistencyError("Cache miss on 304 response")
            logger.debug("Not modified: %s %s", call.method, call.url.path)
            return call.cached.data

        if not response.is_success:
            raise status_error(response)

        envelope = parse_envelope(response)
        if call.ttl > 0:
            self._store(call, envelope.data, response)
        return envelope.data

    def _store(self, call: PreparedCall, payload: Any, response: httpx.Response) -> None:
        entry = CacheEntry(
            data=payload,
            etag=response.headers.get("ETag"),
            last_modified=response.headers.get("Last-Modified"),
        )
        try:
            self._cache.write(call.key, entry)
        except Exception as exc:
            logger.warning("Failed to write cache entry for %s: %s", call.url.path, exc)


# ---------------------------------------------------------------------- #
# Helpers
# ---------------------------------------------------------------------- #


def add_conditional_headers(headers: dict[str, str], entry: CacheEntry) -> None:
    """Attach the revalidation headers for *entry* (non-empty validators only)."""
    if entry.etag:
        headers["If-None-Match"] = entry.etag
    if entry.last_modified:
        headers["If-Modified-Since"] = entry.last_modified


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_envelope(response: httpx.Response) -> Envelope:
    """Decode and validate the response envelope.

    Raises:
        ResponseFormatError: If the body is not JSON or lacks ``object``,
            ``url`` or ``data``.
    """
    try:
        body = response.json()
    except ValueError as exc:
        raise ResponseFormatError(f"Invalid response format: {exc}") from exc
    try:
        return Envelope.model_validate(body)
    except ValidationError as exc:
        raise ResponseFormatError(
            f"Invalid response format: {exc.error_count()} validation error(s) in envelope"
        ) from exc


def status_error(response: httpx.Response) -> HTTPStatusError:
    """Build the typed exception for an error status."""
    status = response.status_code
    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = str(detail.get("error") or detail.get("message") or "")
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    prefix = f"HTTP {status}"
    full_msg = f"{prefix}: {msg}" if msg else prefix

    if status in (401, 403):
        return AuthError(full_msg, status)
    if status == 404:
        return NotFoundError(full_msg, status)
    if status == 429:
        return RateLimitError(full_msg, status)
    if status >= 500:
        return ServerError(full_msg, status)
    return HTTPStatusError(full_msg, status)
