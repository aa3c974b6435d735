"""Testes do HttpScreenDataSource com transporte httpx simulado."""

from __future__ import annotations

import json

import httpx
import pytest

from app.domain.screen_data import ScreenDataSourceConfig
from app.infra.screen_data.http_source import HttpScreenDataSource
from utils.errors import ExternalDataSourceError


def _source(handler) -> HttpScreenDataSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpScreenDataSource(timeout_seconds=1.0, client=client)


@pytest.mark.asyncio
async def test_get_returns_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "US", "title": "United States"}])

    config = ScreenDataSourceConfig(
        endpoint="https://example.test/countries",
        headers={"Authorization": "Bearer t"},
        body={"ignored": True},
    )

    result = await _source(handler).fetch(config)

    assert result == [{"id": "US", "title": "United States"}]
    assert seen[0].method == "GET"
    assert seen[0].headers["Authorization"] == "Bearer t"
    assert seen[0].content == b""


@pytest.mark.asyncio
async def test_post_sends_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"echo": json.loads(request.content)})

    config = ScreenDataSourceConfig(
        endpoint="https://example.test/search", method="POST", body={"q": "br"}
    )

    assert await _source(handler).fetch(config) == {"echo": {"q": "br"}}


@pytest.mark.asyncio
async def test_http_error_status() -> None:
    source = _source(lambda request: httpx.Response(503))

    with pytest.raises(ExternalDataSourceError, match="http_503"):
        await source.fetch(ScreenDataSourceConfig(endpoint="https://example.test"))


@pytest.mark.asyncio
async def test_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ExternalDataSourceError, match="timeout"):
        await _source(handler).fetch(ScreenDataSourceConfig(endpoint="https://example.test"))


@pytest.mark.asyncio
async def test_connection_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ExternalDataSourceError, match="request_failed"):
        await _source(handler).fetch(ScreenDataSourceConfig(endpoint="https://example.test"))


@pytest.mark.asyncio
async def test_invalid_json() -> None:
    source = _source(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(ExternalDataSourceError, match="invalid_json"):
        await source.fetch(ScreenDataSourceConfig(endpoint="https://example.test"))
