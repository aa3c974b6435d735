"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def _firestore_client(exists: bool) -> MagicMock:
    client = MagicMock()
    client.collection.return_value.document.return_value.get.return_value = SimpleNamespace(
        exists=exists
    )
    return client


@pytest.mark.asyncio
async def test_health_reports_service() -> None:
    response = await health_check()

    assert response.status == "healthy"
    assert response.service


@pytest.mark.asyncio
async def test_readiness_skips_backends_not_in_use() -> None:
    request = _build_request_with_state(
        SimpleNamespace(
            redis_client=None,
            firestore_client=None,
            redis_required=False,
            firestore_required=False,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["redis"]["status"] == "skipped"
    assert payload["checks"]["firestore"]["status"] == "skipped"


@pytest.mark.asyncio
async def test_readiness_fails_when_required_client_missing() -> None:
    request = _build_request_with_state(
        SimpleNamespace(
            redis_client=None,
            firestore_client=None,
            redis_required=True,
            firestore_required=True,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["redis"] == {
        "status": "failed",
        "latency_ms": None,
        "error": "not_configured",
    }
    assert payload["checks"]["firestore"]["error"] == "not_configured"


@pytest.mark.asyncio
async def test_readiness_returns_ready_when_dependencies_are_ok() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=True)

    request = _build_request_with_state(
        SimpleNamespace(
            redis_client=redis_client,
            firestore_client=_firestore_client(exists=True),
            redis_required=True,
            firestore_required=True,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["redis"]["status"] == "ok"
    assert payload["checks"]["firestore"]["status"] == "ok"


@pytest.mark.asyncio
async def test_missing_health_doc_is_degraded_but_ready() -> None:
    request = _build_request_with_state(
        SimpleNamespace(
            redis_client=None,
            firestore_client=_firestore_client(exists=False),
            redis_required=False,
            firestore_required=True,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["firestore"]["status"] == "degraded"


@pytest.mark.asyncio
async def test_redis_ping_error_fails_readiness() -> None:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(side_effect=ConnectionError("refused"))

    request = _build_request_with_state(
        SimpleNamespace(
            redis_client=redis_client,
            firestore_client=None,
            redis_required=True,
            firestore_required=False,
        )
    )

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["redis"]["error"] == "ConnectionError"
