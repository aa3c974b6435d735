"""Testes do FlowEndpointCoordinator (sem HTTP)."""

from __future__ import annotations

import json

import pytest

from app.coordinators.flows.models import FlowInbound
from app.infra.crypto import EnvelopeFormatError
from app.services.errors import SignatureMismatchError, StaleKeyError, TenantNotFoundError
from fsm.errors import InvalidFlowRequestError, SessionNotFoundError, UnknownActionError
from tests.fakes.flow_fixtures import (
    build_coordinator,
    build_envelope,
    decrypt_response,
    key_pair,
    make_tenant,
    signed,
)


def _encrypted_inbound(
    payload: dict,
    *,
    slot: int,
    secret: str,
    business_id: str | None = None,
) -> tuple[FlowInbound, bytes, bytes]:
    body, aes_key, iv = build_envelope(payload, key_pair(slot).public_key_pem)
    raw_body = json.dumps(body).encode("utf-8")
    inbound = FlowInbound(
        body=body,
        raw_body=raw_body,
        signature_header=signed(raw_body, secret),
        business_id=business_id,
    )
    return inbound, aes_key, iv


def _plaintext_inbound(payload: dict) -> FlowInbound:
    return FlowInbound(body=payload, raw_body=json.dumps(payload).encode("utf-8"))


class TestEncryptedRequests:
    @pytest.mark.asyncio
    async def test_init_is_answered_with_encrypted_first_screen(self) -> None:
        tenants = [make_tenant("t0", slot=0), make_tenant("t1", slot=1)]
        coordinator, sessions, _ = build_coordinator(tenants)
        inbound, aes_key, iv = _encrypted_inbound(
            {"action": "INIT", "flow_token": "tok-1", "screen": "FORM"},
            slot=1,
            secret="secret-t1",
        )

        result = await coordinator.handle(inbound)

        assert result.encrypted is True
        assert result.tenant_id == "t1"
        response = decrypt_response(result.encrypted_body or "", aes_key, iv)
        assert response["screen"] == "FORM"
        assert response["session_id"] == "tok-1"
        session = await sessions.get("tok-1")
        assert session is not None
        assert session.tenant_id == "t1"

    @pytest.mark.asyncio
    async def test_ping_returns_health_payload(self) -> None:
        coordinator, sessions, _ = build_coordinator([make_tenant("t0", slot=0)])
        inbound, aes_key, iv = _encrypted_inbound(
            {"action": "ping", "version": "3.0"}, slot=0, secret="secret-t0"
        )

        result = await coordinator.handle(inbound)

        assert decrypt_response(result.encrypted_body or "", aes_key, iv) == {
            "data": {"status": "active"}
        }
        assert len(sessions) == 0

    @pytest.mark.asyncio
    async def test_explicit_business_id_header(self) -> None:
        tenants = [make_tenant("t0", slot=0), make_tenant("t1", slot=1)]
        coordinator, _, _ = build_coordinator(tenants)
        inbound, _, _ = _encrypted_inbound(
            {"action": "ping"}, slot=1, secret="secret-t1", business_id="t1"
        )

        result = await coordinator.handle(inbound)

        assert result.tenant_id == "t1"

    @pytest.mark.asyncio
    async def test_explicit_unknown_tenant(self) -> None:
        coordinator, _, _ = build_coordinator([make_tenant("t0", slot=0)])
        inbound, _, _ = _encrypted_inbound(
            {"action": "ping"}, slot=0, secret="secret-t0", business_id="ghost"
        )

        with pytest.raises(TenantNotFoundError):
            await coordinator.handle(inbound)

    @pytest.mark.asyncio
    async def test_wrong_secret_is_rejected(self) -> None:
        coordinator, _, _ = build_coordinator([make_tenant("t0", slot=0)])
        inbound, _, _ = _encrypted_inbound({"action": "ping"}, slot=0, secret="other")

        with pytest.raises(SignatureMismatchError):
            await coordinator.handle(inbound)

    @pytest.mark.asyncio
    async def test_non_ascii_signature_header_is_rejected(self) -> None:
        coordinator, _, _ = build_coordinator([make_tenant("t0", slot=0)])
        body, _, _ = build_envelope({"action": "ping"}, key_pair(0).public_key_pem)
        inbound = FlowInbound(
            body=body,
            raw_body=json.dumps(body).encode("utf-8"),
            signature_header="sha256=éé",
        )

        with pytest.raises(SignatureMismatchError):
            await coordinator.handle(inbound)

    @pytest.mark.asyncio
    async def test_unregistered_key_is_stale(self) -> None:
        coordinator, _, _ = build_coordinator([make_tenant("t0", slot=0, secret="s")])
        inbound, _, _ = _encrypted_inbound({"action": "ping"}, slot=3, secret="s")

        with pytest.raises(StaleKeyError):
            await coordinator.handle(inbound)

    @pytest.mark.asyncio
    async def test_malformed_envelope(self) -> None:
        coordinator, _, _ = build_coordinator([make_tenant("t0", slot=0)])
        body = {"encrypted_flow_data": "***", "encrypted_aes_key": "***", "initial_vector": "***"}

        with pytest.raises(EnvelopeFormatError):
            await coordinator.handle(FlowInbound(body=body, raw_body=b"{}"))

    @pytest.mark.asyncio
    async def test_back_without_session(self) -> None:
        coordinator, _, answers = build_coordinator([make_tenant("t0", slot=0)])
        inbound, _, _ = _encrypted_inbound(
            {"action": "BACK", "flow_token": "ghost", "screen": "FORM"},
            slot=0,
            secret="secret-t0",
        )

        with pytest.raises(SessionNotFoundError):
            await coordinator.handle(inbound)
        assert answers.records == []


class TestPlaintextRequests:
    @pytest.mark.asyncio
    async def test_rejected_when_disabled(self) -> None:
        coordinator, _, _ = build_coordinator([])

        with pytest.raises(InvalidFlowRequestError, match="Encrypted flow envelope required"):
            await coordinator.handle(_plaintext_inbound({"action": "INIT", "screen": "FORM"}))

    @pytest.mark.asyncio
    async def test_requires_screen_except_ping(self) -> None:
        coordinator, _, _ = build_coordinator([], allow_plaintext=True)

        with pytest.raises(InvalidFlowRequestError, match="screen"):
            await coordinator.handle(_plaintext_inbound({"action": "INIT"}))

        result = await coordinator.handle(_plaintext_inbound({"action": "ping"}))
        assert result.json_body == {"data": {"status": "active"}}

    @pytest.mark.asyncio
    async def test_unknown_action(self) -> None:
        coordinator, _, _ = build_coordinator([], allow_plaintext=True)

        with pytest.raises(UnknownActionError):
            await coordinator.handle(_plaintext_inbound({"action": "JUMP", "screen": "FORM"}))

    @pytest.mark.asyncio
    async def test_json_response_with_business_id_field(self) -> None:
        coordinator, sessions, _ = build_coordinator([], allow_plaintext=True)

        result = await coordinator.handle(
            _plaintext_inbound(
                {"action": "INIT", "screen": "FORM", "flow_token": "tok", "business_id": "t9"}
            )
        )

        assert result.encrypted is False
        assert result.json_body is not None
        assert result.json_body["screen"] == "FORM"
        assert result.tenant_id == "t9"
        session = await sessions.get("tok")
        assert session is not None
        assert session.tenant_id == "t9"
