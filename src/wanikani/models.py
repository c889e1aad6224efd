"""Canonical Pydantic models shared across all wanikani modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or injected into the client at construction:
    :class:`CacheTTLConfig`, :class:`GlobalConfig`, and :class:`ClientSettings`.

**Request models** -- what an endpoint hands to the request layer:
    :class:`RequestOptions`.

**Wire and cache models** -- validated once at the deserialisation boundary:
    :class:`Envelope`, :class:`Pages`, and :class:`CacheEntry`.

All models use Pydantic v2. Wire models use ``extra="allow"`` so that fields
the client does not interpret (``pages``, ``total_count``) survive validation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, StrictStr

DEFAULT_BASE_URL = "https://api.wanikani.com/v2/"
DEFAULT_API_REVISION = "20170710"


# --- Cache TTL ---


class CacheTTLConfig(BaseModel):
    """Per-resource cache durations, in seconds.

    Every category is optional.  :meth:`ttl_for` resolves a category to an
    explicit override when one is set, otherwise to the built-in duration for
    that resource, otherwise to :attr:`default`.

    Example::

        CacheTTLConfig(subjects=7 * 24 * 3600, summary=0)
    """

    subjects: Optional[int] = Field(default=None, ge=0)
    assignments: Optional[int] = Field(default=None, ge=0)
    reviews: Optional[int] = Field(default=None, ge=0)
    user: Optional[int] = Field(default=None, ge=0)
    study_materials: Optional[int] = Field(default=None, ge=0)
    summary: Optional[int] = Field(default=None, ge=0)
    voice_actors: Optional[int] = Field(default=None, ge=0)
    level_progressions: Optional[int] = Field(default=None, ge=0)
    resets: Optional[int] = Field(default=None, ge=0)
    review_statistics: Optional[int] = Field(default=None, ge=0)
    srs: Optional[int] = Field(default=None, ge=0)
    default: int = Field(default=3600, ge=0, description="Fallback TTL in seconds")

    def ttl_for(self, category: str) -> int:
        """Return the cache duration in seconds for *category*.

        Raises:
            KeyError: If *category* is not a known resource category.
        """
        if category not in type(self).model_fields:
            raise KeyError(category)
        override = getattr(self, category, None)
        if override is not None:
            return override
        return BUILTIN_TTL_SECONDS.get(category, self.default)


# Subjects, reviews and voice actors practically never change once published;
# the summary rolls over every hour.
BUILTIN_TTL_SECONDS: dict[str, int] = {
    "subjects": 24 * 60 * 60,
    "reviews": 24 * 60 * 60,
    "voice_actors": 24 * 60 * 60,
    "level_progressions": 60 * 60,
    "review_statistics": 60 * 60,
    "summary": 60,
}


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/wanikani/config.json``.

    Loaded and saved by :func:`~wanikani.config.load_global_config` and
    :func:`~wanikani.config.save_global_config`.
    """

    api_key_source: str = Field(
        default="env:WANIKANI_API_KEY",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    cache_dir: Optional[str] = Field(
        default=None, description="Override the XDG cache directory"
    )
    timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds (transport default when unset)"
    )
    prune_max_age_seconds: int = Field(
        default=7 * 24 * 60 * 60, ge=0, description="Default age for `cache prune`"
    )
    cache_ttl: CacheTTLConfig = Field(default_factory=CacheTTLConfig)


class ClientSettings(BaseModel):
    """Everything the request/cache core needs, injected at construction.

    The core never reads the environment itself; :class:`~wanikani.api.WaniKaniAPI`
    resolves these values and hands them over.
    """

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    cache_dir: Path
    base_url: str = DEFAULT_BASE_URL
    api_revision: str = DEFAULT_API_REVISION
    timeout: Optional[float] = None


# --- Request ---


class RequestOptions(BaseModel):
    """Method, headers and body of a single API call.

    ``headers`` may hold non-string values; they are ignored both when the
    request is sent and when its fingerprint is computed.
    """

    method: str = "GET"
    headers: dict[str, Any] = Field(default_factory=dict)
    body: Optional[str] = None


# --- Wire format ---


class Pages(BaseModel):
    """Pagination block of a collection envelope."""

    per_page: int
    next_url: Optional[str] = None
    previous_url: Optional[str] = None


class Envelope(BaseModel):
    """Response wrapper returned by every API endpoint.

    Single resources look like ``{object, url, data_updated_at, data}``;
    collections add ``pages`` and ``total_count`` and carry a list in
    ``data``.  Only :attr:`data` is handed back to callers.
    """

    model_config = ConfigDict(extra="allow")

    object: StrictStr
    url: StrictStr
    data: Any
    data_updated_at: Optional[str] = None
    additional_data: Optional[dict[str, Any]] = None
    pages: Optional[Pages] = None
    total_count: Optional[int] = None


# --- Cache ---


class CacheEntry(BaseModel):
    """A cached payload plus the validators used to revalidate it.

    Persisted as ``{"data": ..., "etag": ..., "lastModified": ...}`` with the
    validators omitted when absent.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: Any
    etag: Optional[StrictStr] = None
    last_modified: Optional[StrictStr] = Field(default=None, alias="lastModified")

    def to_file_dict(self) -> dict[str, Any]:
        """Return the on-disk representation (``data`` is kept even when ``None``)."""
        record: dict[str, Any] = {"data": self.data}
        if self.etag is not None:
            record["etag"] = self.etag
        if self.last_modified is not None:
            record["lastModified"] = self.last_modified
        return record
