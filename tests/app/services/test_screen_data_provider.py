"""Testes do ScreenDataProvider: cache, refresh e fallback."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from app.domain.screen_data import ScreenDataCacheEntry, ScreenDataSourceConfig, ScreenOption
from app.infra.stores import MemoryScreenDataCache
from app.services.screen_data_provider import (
    ScreenDataProvider,
    build_source_configs,
    default_transform,
)
from utils.errors import ExternalDataSourceError, FirestoreUnavailableError

COUNTRIES = ScreenDataSourceConfig(endpoint="https://example.test/countries")


async def _seed(cache: MemoryScreenDataCache, screen_id: str, *options: tuple[str, str]) -> None:
    await cache.put(
        ScreenDataCacheEntry(
            screen_id=screen_id,
            options=[ScreenOption(id=option_id, title=title) for option_id, title in options],
        )
    )


class TestDefaultTransform:
    def test_uses_id_and_title(self) -> None:
        assert default_transform([{"id": "US", "title": "United States"}]) == [
            {"id": "US", "title": "United States"}
        ]

    def test_falls_back_to_alternative_keys(self) -> None:
        raw = [{"value": 1, "label": "One"}, {"value": 2, "name": "Two"}, {"id": "x", "text": "Ex"}]
        assert default_transform(raw) == [
            {"id": "1", "title": "One"},
            {"id": "2", "title": "Two"},
            {"id": "x", "title": "Ex"},
        ]

    def test_missing_id_uses_index(self) -> None:
        assert default_transform([{"title": "Only title"}]) == [
            {"id": "option_0", "title": "Only title"}
        ]

    def test_missing_title_uses_id(self) -> None:
        assert default_transform([{"id": "BR"}]) == [{"id": "BR", "title": "BR"}]

    def test_unwraps_data_key_and_scalars(self) -> None:
        assert default_transform({"data": ["a", None, "b"]}) == [
            {"id": "a", "title": "a"},
            {"id": "b", "title": "b"},
        ]

    def test_unsupported_shape_is_empty(self) -> None:
        assert default_transform({"items": []}) == []
        assert default_transform("text") == []


class TestBuildSourceConfigs:
    def test_invalid_entries_are_skipped(self) -> None:
        configs = build_source_configs(
            {
                "COUNTRY": {"endpoint": "https://example.test/c", "method": "POST", "body": {"q": 1}},
                "BROKEN": {"method": "GET"},
            }
        )
        assert list(configs) == ["COUNTRY"]
        assert configs["COUNTRY"].method == "POST"


class TestScreenDataProvider:
    @pytest.mark.asyncio
    async def test_without_source_returns_cache(self) -> None:
        cache = MemoryScreenDataCache()
        await _seed(cache, "FORM", ("US", "United States"))

        provider = ScreenDataProvider(cache)

        assert await provider.get_screen_data("FORM") == {
            "data_source": [{"id": "US", "title": "United States"}]
        }

    @pytest.mark.asyncio
    async def test_empty_cache_gives_empty_data(self) -> None:
        provider = ScreenDataProvider(MemoryScreenDataCache())
        assert await provider.get_screen_data("FORM") == {}

    @pytest.mark.asyncio
    async def test_refresh_overwrites_cache(self) -> None:
        cache = MemoryScreenDataCache()
        await _seed(cache, "FORM", ("OLD", "Old"))
        source = AsyncMock()
        source.fetch.return_value = [{"id": "US", "name": "United States"}]

        provider = ScreenDataProvider(cache, source, {"FORM": COUNTRIES})
        options = await provider.get_options("FORM")

        assert options == [{"id": "US", "title": "United States"}]
        source.fetch.assert_awaited_once_with(COUNTRIES)
        entry = await cache.get("FORM", "data_source")
        assert entry is not None
        assert entry.options_as_dicts() == options

    @pytest.mark.asyncio
    async def test_source_failure_falls_back_to_cache(self) -> None:
        cache = MemoryScreenDataCache()
        await _seed(cache, "FORM", ("US", "United States"))
        source = AsyncMock()
        source.fetch.side_effect = ExternalDataSourceError("http_503")

        provider = ScreenDataProvider(cache, source, {"FORM": COUNTRIES})

        assert await provider.get_options("FORM") == [{"id": "US", "title": "United States"}]

    @pytest.mark.asyncio
    async def test_source_failure_without_cache_gives_empty_list(self) -> None:
        source = AsyncMock()
        source.fetch.side_effect = ExternalDataSourceError("request_failed")

        provider = ScreenDataProvider(MemoryScreenDataCache(), source, {"FORM": COUNTRIES})

        assert await provider.get_options("FORM") == []

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self) -> None:
        cache = MemoryScreenDataCache()
        await _seed(cache, "FORM", ("US", "United States"))

        async def _slow_fetch(config: ScreenDataSourceConfig) -> Any:
            await asyncio.sleep(1)
            return []

        source = AsyncMock()
        source.fetch.side_effect = _slow_fetch

        provider = ScreenDataProvider(cache, source, {"FORM": COUNTRIES}, timeout_seconds=0.01)

        assert await provider.get_options("FORM") == [{"id": "US", "title": "United States"}]

    @pytest.mark.asyncio
    async def test_failing_transform_falls_back(self) -> None:
        def _broken(raw: Any) -> list[dict[str, str]]:
            raise KeyError("missing")

        source = AsyncMock()
        source.fetch.return_value = {"weird": True}
        config = ScreenDataSourceConfig(endpoint="https://example.test", transform=_broken)

        provider = ScreenDataProvider(MemoryScreenDataCache(), source, {"FORM": config})

        assert await provider.get_options("FORM") == []

    @pytest.mark.asyncio
    async def test_custom_transform_is_applied(self) -> None:
        source = AsyncMock()
        source.fetch.return_value = {"rows": [["SP", "São Paulo"]]}
        config = ScreenDataSourceConfig(
            endpoint="https://example.test",
            transform=lambda raw: [{"id": row[0], "title": row[1]} for row in raw["rows"]],
        )

        provider = ScreenDataProvider(MemoryScreenDataCache(), source)
        provider.register_source("STATE", config)

        assert await provider.get_options("STATE") == [{"id": "SP", "title": "São Paulo"}]

    @pytest.mark.asyncio
    async def test_cache_read_failure_is_not_fatal(self) -> None:
        cache = AsyncMock()
        cache.get.side_effect = FirestoreUnavailableError("down")

        provider = ScreenDataProvider(cache)

        assert await provider.get_options("FORM") == []

    @pytest.mark.asyncio
    async def test_other_data_kind_skips_source(self) -> None:
        source = AsyncMock()
        provider = ScreenDataProvider(MemoryScreenDataCache(), source, {"FORM": COUNTRIES})

        assert await provider.get_options("FORM", "cities") == []
        source.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transform_raising_unexpected_error_falls_back(self) -> None:
        def _exploding(raw: Any) -> list[dict[str, str]]:
            raise RuntimeError("transform exploded")

        cache = MemoryScreenDataCache()
        await _seed(cache, "FORM", ("US", "United States"))
        source = AsyncMock()
        source.fetch.return_value = [{"id": "UK"}]
        config = ScreenDataSourceConfig(endpoint="https://example.test", transform=_exploding)

        provider = ScreenDataProvider(cache, source, {"FORM": config})

        assert await provider.get_options("FORM") == [{"id": "US", "title": "United States"}]

    @pytest.mark.asyncio
    async def test_source_raising_unexpected_error_gives_empty_data(self) -> None:
        source = AsyncMock()
        source.fetch.side_effect = OSError("socket gone")

        provider = ScreenDataProvider(MemoryScreenDataCache(), source, {"FORM": COUNTRIES})

        assert await provider.get_screen_data("FORM") == {}


class TestSeedOptions:
    @pytest.mark.asyncio
    async def test_seed_is_served_without_source(self) -> None:
        provider = ScreenDataProvider(MemoryScreenDataCache())

        entry = await provider.seed_options("FORM", [{"id": "US", "title": "United States"}])

        assert entry.cache_key == "FORM__data_source"
        assert await provider.get_screen_data("FORM") == {
            "data_source": [{"id": "US", "title": "United States"}]
        }

    @pytest.mark.asyncio
    async def test_seed_registers_source_config(self) -> None:
        source = AsyncMock()
        source.fetch.return_value = [{"id": "UK", "title": "United Kingdom"}]
        provider = ScreenDataProvider(MemoryScreenDataCache(), source)

        await provider.seed_options("FORM", [], source_config=COUNTRIES)

        assert await provider.get_options("FORM") == [{"id": "UK", "title": "United Kingdom"}]
        source.fetch.assert_awaited_once_with(COUNTRIES)

    @pytest.mark.asyncio
    async def test_seed_store_failure_propagates(self) -> None:
        cache = AsyncMock()
        cache.put.side_effect = FirestoreUnavailableError("down")
        provider = ScreenDataProvider(cache)

        with pytest.raises(FirestoreUnavailableError):
            await provider.seed_options("FORM", [{"id": "US", "title": "US"}])
