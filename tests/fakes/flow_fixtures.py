"""Helpers de teste: tenants com chaves reais e envelopes cifrados."""

from __future__ import annotations

import base64
import json
import os
from functools import lru_cache
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.hashes import SHA256

from app.coordinators.flows.endpoint import FlowEndpointCoordinator
from app.domain.tenant import TenantCredential
from app.infra.crypto import GeneratedKeyPair, compute_signature, generate_key_pair
from app.infra.stores import (
    MemoryFlowAnswerStore,
    MemoryFlowSessionStore,
    MemoryScreenDataCache,
    MemoryTenantStore,
)
from app.services.screen_data_provider import ScreenDataProvider
from app.services.signature_policy import SignaturePolicy, SignatureVerifier
from app.services.tenant_resolver import TenantKeyResolver
from fsm.manager import FlowActionStateMachine


@lru_cache(maxsize=16)
def key_pair(slot: int) -> GeneratedKeyPair:
    """Par RSA reutilizado entre testes (geração é lenta)."""
    return generate_key_pair()


def make_tenant(
    tenant_id: str,
    *,
    slot: int = 0,
    secret: str | None = None,
    uploaded: bool = True,
    active: bool = True,
) -> TenantCredential:
    pair = key_pair(slot)
    return TenantCredential(
        tenant_id=tenant_id,
        name=f"Tenant {tenant_id}",
        private_key_pem=pair.private_key_pem,
        public_key_pem=pair.public_key_pem,
        app_secret=secret or f"secret-{tenant_id}",
        public_key_uploaded=uploaded,
        is_active=active,
    )


def build_envelope(
    payload: dict[str, Any] | bytes,
    public_key_pem: str,
    *,
    aes_key: bytes | None = None,
    iv: bytes | None = None,
) -> tuple[dict[str, str], bytes, bytes]:
    """Cifra o payload como a plataforma faz; retorna (body, aes_key, iv)."""
    aes_key = aes_key or os.urandom(16)
    iv = iv or os.urandom(16)
    plaintext = (
        payload
        if isinstance(payload, bytes)
        else json.dumps(payload, separators=(",", ":")).encode("utf-8")
    )
    public_key = serialization.load_pem_public_key(public_key_pem.encode("utf-8"))
    wrapped_key = public_key.encrypt(
        aes_key,
        padding.OAEP(mgf=padding.MGF1(algorithm=SHA256()), algorithm=SHA256(), label=None),
    )
    body = {
        "encrypted_flow_data": base64.b64encode(AESGCM(aes_key).encrypt(iv, plaintext, None)).decode(),
        "encrypted_aes_key": base64.b64encode(wrapped_key).decode(),
        "initial_vector": base64.b64encode(iv).decode(),
    }
    return body, aes_key, iv


def decrypt_response(encrypted_b64: str, aes_key: bytes, iv: bytes) -> dict[str, Any]:
    """Abre a resposta como a plataforma faz (IV complementado)."""
    flipped_iv = bytes(byte ^ 0xFF for byte in iv)
    plaintext = AESGCM(aes_key).decrypt(flipped_iv, base64.b64decode(encrypted_b64), None)
    return json.loads(plaintext.decode("utf-8"))


def signed(raw_body: bytes, secret: str) -> str:
    return compute_signature(raw_body, secret)


def build_coordinator(
    tenants: list[TenantCredential],
    *,
    policy: str = "reject",
    allow_plaintext: bool = False,
    max_candidates: int = 50,
) -> tuple[FlowEndpointCoordinator, MemoryFlowSessionStore, MemoryFlowAnswerStore]:
    """Coordinator completo sobre stores em memória."""
    sessions = MemoryFlowSessionStore()
    answers = MemoryFlowAnswerStore()
    resolver = TenantKeyResolver(
        MemoryTenantStore(tenants),
        SignatureVerifier(SignaturePolicy(policy)),
        max_candidates=max_candidates,
    )
    machine = FlowActionStateMachine(sessions, answers, ScreenDataProvider(MemoryScreenDataCache()))
    coordinator = FlowEndpointCoordinator(
        resolver=resolver,
        state_machine=machine,
        allow_plaintext=allow_plaintext,
    )
    return coordinator, sessions, answers
