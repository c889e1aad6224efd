"""Top-level clients that wire the endpoints onto a request façade.

:class:`WaniKaniAPI` resolves the API key and cache directory, builds the
injected :class:`~wanikani.models.ClientSettings`, and exposes one attribute
per resource::

    api = WaniKaniAPI()              # reads WANIKANI_API_KEY
    user = api.user.get()
    subjects = api.subjects.get_all(updated_after=datetime(2024, 1, 1))

:class:`AsyncWaniKaniAPI` exposes the same attributes on top of
:class:`~wanikani.client.AsyncClient`; every endpoint method then returns an
awaitable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import httpx

from wanikani.cache.store import CacheStore
from wanikani.client import AsyncClient, SyncClient
from wanikani.config import resolve_api_key, resolve_cache_dir, resolve_credential
from wanikani.endpoints import (
    AssignmentsEndpoint,
    LevelProgressionsEndpoint,
    ResetsEndpoint,
    ReviewsEndpoint,
    ReviewStatisticsEndpoint,
    SpacedRepetitionSystemsEndpoint,
    StudyMaterialsEndpoint,
    SubjectsEndpoint,
    SummaryEndpoint,
    UserEndpoint,
    VoiceActorsEndpoint,
)
from wanikani.models import (
    DEFAULT_BASE_URL,
    CacheTTLConfig,
    ClientSettings,
    GlobalConfig,
)

_APIT = TypeVar("_APIT", bound="_BaseAPI")


class _BaseAPI(ABC):
    """Settings resolution and endpoint wiring shared by both clients.

    Args:
        api_key: API key; falls back to the ``WANIKANI_API_KEY`` environment
            variable.
        ttl: Per-resource cache durations.
        cache_dir: Cache directory; defaults to ``$WANIKANI_CACHE_DIR`` or the
            XDG cache directory.
        base_url: API base URL.
        timeout: Request timeout in seconds; httpx's default when ``None``.
        transport: Optional httpx transport (tests).

    Raises:
        ConfigError: If no API key is available.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        ttl: Optional[CacheTTLConfig] = None,
        cache_dir: Union[str, Path, None] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Any = None,
    ) -> None:
        self.settings = ClientSettings(
            api_key=resolve_api_key(api_key),
            cache_dir=Path(cache_dir) if cache_dir is not None else resolve_cache_dir(),
            base_url=base_url,
            timeout=timeout,
        )
        self.ttl = ttl if ttl is not None else CacheTTLConfig()
        self.client = self._make_client(CacheStore(self.settings.cache_dir), transport)

        self.user = UserEndpoint(self.client, self.ttl)
        self.summary = SummaryEndpoint(self.client, self.ttl)
        self.subjects = SubjectsEndpoint(self.client, self.ttl)
        self.assignments = AssignmentsEndpoint(self.client, self.ttl)
        self.reviews = ReviewsEndpoint(self.client, self.ttl)
        self.review_statistics = ReviewStatisticsEndpoint(self.client, self.ttl)
        self.study_materials = StudyMaterialsEndpoint(self.client, self.ttl)
        self.resets = ResetsEndpoint(self.client, self.ttl)
        self.level_progressions = LevelProgressionsEndpoint(self.client, self.ttl)
        self.spaced_repetition_systems = SpacedRepetitionSystemsEndpoint(self.client, self.ttl)
        self.voice_actors = VoiceActorsEndpoint(self.client, self.ttl)

    @classmethod
    def from_config(cls: type[_APIT], config: GlobalConfig, transport: Any = None) -> _APIT:
        """Build a client from a persisted :class:`~wanikani.models.GlobalConfig`."""
        return cls(
            resolve_credential(config.api_key_source),
            ttl=config.cache_ttl,
            cache_dir=resolve_cache_dir(config),
            timeout=config.timeout,
            transport=transport,
        )

    @abstractmethod
    def _make_client(self, cache: CacheStore, transport: Any) -> Union[SyncClient, AsyncClient]:
        """Build the request façade the endpoints are bound to."""
        ...

    @property
    def cache(self) -> CacheStore:
        return self.client.cache

    def prune_cache(self, max_age_seconds: float) -> int:
        """Delete cache entries older than *max_age_seconds*.  Returns the number removed."""
        return self.cache.prune(max_age_seconds * 1000)


class WaniKaniAPI(_BaseAPI):
    """Blocking WaniKani API client.

    Example::

        with WaniKaniAPI() as api:
            user = api.user.get()
    """

    def _make_client(self, cache: CacheStore, transport: Optional[httpx.BaseTransport]) -> SyncClient:
        return SyncClient(self.settings, cache=cache, transport=transport)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> WaniKaniAPI:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncWaniKaniAPI(_BaseAPI):
    """Non-blocking WaniKani API client; endpoint methods return awaitables.

    Example::

        async with AsyncWaniKaniAPI() as api:
            summary = await api.summary.get()
    """

    def _make_client(
        self, cache: CacheStore, transport: Optional[httpx.AsyncBaseTransport]
    ) -> AsyncClient:
        return AsyncClient(self.settings, cache=cache, transport=transport)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> AsyncWaniKaniAPI:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
