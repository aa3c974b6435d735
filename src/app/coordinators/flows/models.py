"""Modelos de coordenação do endpoint de dados de Flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class FlowInbound:
    """Requisição HTTP já lida, antes de qualquer decisão de protocolo."""

    body: dict[str, Any]
    raw_body: bytes
    signature_header: str | None = None
    business_id: str | None = None


@dataclass(slots=True, frozen=True)
class FlowEndpointResult:
    """Resultado pronto para serialização HTTP.

    Envelopes criptografados voltam como base64 (`text/plain`);
    requisições em texto puro voltam como JSON.
    """

    encrypted: bool
    encrypted_body: str | None = None
    json_body: dict[str, Any] | None = None
    tenant_id: str | None = None
    screen: str | None = None
