"""Tests for the top-level WaniKaniAPI and AsyncWaniKaniAPI clients."""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import Any

import httpx
import pytest

from wanikani import AsyncWaniKaniAPI, WaniKaniAPI
from wanikani.api import _BaseAPI
from wanikani.client import AsyncClient, SyncClient
from wanikani.exceptions import ConfigError
from wanikani.models import CacheEntry, CacheTTLConfig, GlobalConfig


def _handler(request: httpx.Request) -> httpx.Response:
    data: Any = {"path": request.url.path, "method": request.method}
    return httpx.Response(
        200,
        headers={"ETag": '"v1"'},
        json={"object": "report", "url": str(request.url), "data": data},
    )


class TestConstruction:
    def test_api_key_from_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WANIKANI_API_KEY", "env-key")
        api = WaniKaniAPI(cache_dir=isolated_config / "c")
        assert api.settings.api_key.get_secret_value() == "env-key"

    def test_missing_key(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            WaniKaniAPI()

    def test_cache_dir_from_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WANIKANI_CACHE_DIR", str(isolated_config / "env-cache"))
        api = WaniKaniAPI("k")
        assert api.cache.directory == isolated_config / "env-cache"

    def test_explicit_cache_dir(self, isolated_config: Path) -> None:
        api = WaniKaniAPI("k", cache_dir=str(isolated_config / "explicit"))
        assert api.cache.directory == isolated_config / "explicit"

    def test_sync_client(self, isolated_config: Path) -> None:
        assert isinstance(WaniKaniAPI("k").client, SyncClient)

    def test_async_client(self, isolated_config: Path) -> None:
        assert isinstance(AsyncWaniKaniAPI("k").client, AsyncClient)

    def test_from_config(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CUSTOM_KEY", "cfg-key")
        config = GlobalConfig(
            api_key_source="env:CUSTOM_KEY",
            cache_dir=str(isolated_config / "cfg-cache"),
            timeout=7.0,
            cache_ttl=CacheTTLConfig(summary=0),
        )
        api = WaniKaniAPI.from_config(config)
        assert api.settings.api_key.get_secret_value() == "cfg-key"
        assert api.settings.timeout == 7.0
        assert api.cache.directory == isolated_config / "cfg-cache"
        assert api.summary.ttl_seconds == 0

    def test_base_class_is_abstract(self, isolated_config: Path) -> None:
        with pytest.raises(TypeError):
            _BaseAPI("k")

    def test_from_config_builds_calling_class(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WANIKANI_API_KEY", "cfg-key")
        api = AsyncWaniKaniAPI.from_config(GlobalConfig())
        assert isinstance(api, AsyncWaniKaniAPI)
        assert isinstance(api.client, AsyncClient)


class TestRequests:
    def test_endpoints_go_through_cache(self, isolated_config: Path) -> None:
        with WaniKaniAPI("k", cache_dir=isolated_config / "c", transport=httpx.MockTransport(_handler)) as api:
            assert api.user.get() == {"path": "/v2/user", "method": "GET"}
            assert api.subjects.get(1) == {"path": "/v2/subjects/1", "method": "GET"}
            assert api.spaced_repetition_systems.get_all()["path"] == "/v2/spaced_repetition_systems"
        assert len(list((isolated_config / "c").glob("*.json"))) == 3

    def test_writes_are_not_cached(self, isolated_config: Path) -> None:
        with WaniKaniAPI("k", cache_dir=isolated_config / "c", transport=httpx.MockTransport(_handler)) as api:
            result = api.reviews.create(1, 0, 0)
        assert result == {"path": "/v2/reviews", "method": "POST"}
        assert not (isolated_config / "c").exists()

    def test_async_endpoints(self, isolated_config: Path) -> None:
        async def scenario() -> Any:
            async with AsyncWaniKaniAPI(
                "k", cache_dir=isolated_config / "c", transport=httpx.MockTransport(_handler)
            ) as api:
                return await api.summary.get()

        assert asyncio.run(scenario()) == {"path": "/v2/summary", "method": "GET"}

    def test_prune_cache_in_seconds(self, isolated_config: Path) -> None:
        api = WaniKaniAPI("k", cache_dir=isolated_config / "c")
        api.cache.write("1" * 64, CacheEntry(data=1))
        api.cache.write("2" * 64, CacheEntry(data=2))
        old = time.time() - 3600
        os.utime(api.cache.path_for("2" * 64), (old, old))

        assert api.prune_cache(600) == 1
        assert api.cache.path_for("1" * 64).exists()
