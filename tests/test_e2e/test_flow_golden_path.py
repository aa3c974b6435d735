"""Teste E2E do endpoint de Flow via FastAPI (stores em memória)."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

import app.bootstrap as bootstrap
from config.settings import (
    get_base_settings,
    get_flow_endpoint_settings,
    get_flow_session_settings,
    get_flow_store_settings,
)
from tests.fakes.flow_fixtures import build_envelope, decrypt_response, key_pair, make_tenant, signed

_CACHED = (
    get_base_settings,
    get_flow_endpoint_settings,
    get_flow_session_settings,
    get_flow_store_settings,
    bootstrap.get_flow_session_store,
    bootstrap.get_flow_answer_store,
    bootstrap.get_screen_data_cache,
    bootstrap.get_tenant_store,
    bootstrap.get_signature_verifier,
    bootstrap.get_tenant_resolver,
    bootstrap.get_screen_data_provider,
    bootstrap.get_flow_state_machine,
    bootstrap.get_flow_endpoint_coordinator,
)


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    for name in (
        "ENVIRONMENT",
        "FLOW_SESSION_STORE_BACKEND",
        "FLOW_ANSWER_STORE_BACKEND",
        "FLOW_SCREEN_CACHE_BACKEND",
        "FLOW_TENANT_STORE_BACKEND",
        "FLOW_SIGNATURE_POLICY",
        "FLOW_SCREEN_DATA_SOURCES",
        "FLOW_ADMIN_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FLOW_ALLOW_PLAINTEXT_REQUESTS", "true")
    for getter in _CACHED:
        getter.cache_clear()

    from app.app import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

    for getter in _CACHED:
        getter.cache_clear()


@pytest.mark.e2e
def test_plaintext_init_then_data_exchange(client: TestClient) -> None:
    init = client.post(
        "/flows/data-endpoint",
        json={"action": "INIT", "screen": "FORM", "flow_token": "e2e-1"},
    )
    assert init.status_code == 200
    assert init.json()["screen"] == "FORM"
    assert init.headers["x-correlation-id"]

    exchange = client.post(
        "/flows/data-endpoint",
        json={
            "action": "DATA_EXCHANGE",
            "screen": "FORM",
            "flow_token": "e2e-1",
            "data": {"country": "US"},
        },
    )
    assert exchange.status_code == 200
    body = exchange.json()
    assert body["screen"] == "SUCCESS"
    assert body["data"]["processed"] is True

    records = bootstrap.get_flow_answer_store().records
    assert [(r.session_id, r.field_name, r.field_value) for r in records] == [
        ("e2e-1", "country", "US")
    ]


@pytest.mark.e2e
def test_encrypted_request_resolves_tenant(client: TestClient) -> None:
    asyncio.run(bootstrap.get_tenant_store().save(make_tenant("acme", slot=0)))
    envelope, aes_key, iv = build_envelope(
        {"action": "INIT", "screen": "FORM", "flow_token": "e2e-2"},
        key_pair(0).public_key_pem,
    )
    raw_body = json.dumps(envelope).encode("utf-8")

    response = client.post(
        "/flows/data-endpoint",
        content=raw_body,
        headers={
            "content-type": "application/json",
            "x-hub-signature-256": signed(raw_body, "secret-acme"),
        },
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    decrypted = decrypt_response(response.text, aes_key, iv)
    assert decrypted["screen"] == "FORM"
    assert decrypted["session_id"] == "e2e-2"


@pytest.mark.e2e
def test_unknown_key_returns_421(client: TestClient) -> None:
    asyncio.run(bootstrap.get_tenant_store().save(make_tenant("acme", slot=0)))
    envelope, _, _ = build_envelope({"action": "ping"}, key_pair(4).public_key_pem)
    raw_body = json.dumps(envelope).encode("utf-8")

    response = client.post(
        "/flows/data-endpoint",
        content=raw_body,
        headers={"x-hub-signature-256": signed(raw_body, "secret-acme")},
    )

    assert response.status_code == 421
    assert response.json()["error"] == "stale_key"


@pytest.mark.e2e
def test_health_endpoints(client: TestClient) -> None:
    assert client.get("/health").json()["status"] == "healthy"
    ready = client.get("/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["redis"]["status"] == "skipped"


@pytest.mark.e2e
def test_seeded_options_reach_init_and_answers_are_listed(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    token = "admin-" + "x" * 32
    monkeypatch.setenv("FLOW_ADMIN_TOKEN", token)
    get_flow_endpoint_settings.cache_clear()
    admin_headers = {"x-admin-token": token}

    seeded = client.post(
        "/flows/screen-data/FORM",
        json={"options": [{"id": "US", "title": "United States"}, {"id": "UK", "title": "United Kingdom"}]},
        headers=admin_headers,
    )
    assert seeded.status_code == 200
    assert seeded.json()["option_count"] == 2

    init = client.post(
        "/flows/data-endpoint",
        json={"action": "INIT", "screen": "FORM", "flow_token": "e2e-4"},
    )
    assert init.json()["data"]["data_source"] == [
        {"id": "US", "title": "United States"},
        {"id": "UK", "title": "United Kingdom"},
    ]

    client.post(
        "/flows/data-endpoint",
        json={"action": "DATA_EXCHANGE", "screen": "FORM", "flow_token": "e2e-4", "data": {"country": "UK"}},
    )

    responses = client.get("/flows/responses/e2e-4", headers=admin_headers)
    assert responses.status_code == 200
    assert [r["field_value"] for r in responses.json()["responses"]] == ["UK"]

    session = client.get("/flows/sessions/e2e-4", headers=admin_headers)
    assert session.json()["session"]["current_screen"] == "COMPLETED"
    assert session.json()["completed"] is True
