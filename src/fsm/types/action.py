"""
Tipos de entrada e saída da máquina de ações de Flow.

FlowAction é um conjunto fechado: qualquer outra tag vira
UnknownActionError na borda, antes de chegar aos handlers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fsm.errors import UnknownActionError
from fsm.states.screens import VirtualState

HEALTH_CHECK_DATA: dict[str, Any] = {"status": "active"}


class FlowAction(StrEnum):
    """Ações do protocolo de Flow."""

    INIT = "INIT"
    BACK = "BACK"
    DATA_EXCHANGE = "DATA_EXCHANGE"
    COMPLETE = "COMPLETE"
    PING = "ping"

    def __str__(self) -> str:
        return self.value


def parse_action(raw_action: object) -> FlowAction:
    """
    Converte a tag recebida em FlowAction (sem diferenciar maiúsculas).

    A plataforma envia "data_exchange" em minúsculas e "ping" para
    health check; testes manuais costumam usar maiúsculas.

    Raises:
        UnknownActionError: Tag ausente ou desconhecida.
    """
    if not isinstance(raw_action, str) or not raw_action.strip():
        raise UnknownActionError(raw_action)
    normalized = raw_action.strip().upper()
    for action in FlowAction:
        if action.value.upper() == normalized:
            return action
    raise UnknownActionError(raw_action)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class FlowActionRequest:
    """
    Ação já descriptografada (ou recebida em texto puro).

    Attributes:
        action: Ação do protocolo
        screen: Tela de origem/destino informada pelo cliente
        flow_token: Token do flow na plataforma
        session_id: Sessão explícita, senão o flow_token
        payload: Campos submetidos (`payload` ou `data`)
        tenant_id: Tenant resolvido, quando conhecido
    """

    action: FlowAction
    screen: str | None = None
    flow_token: str | None = None
    session_id: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    tenant_id: str | None = None

    @classmethod
    def from_payload(
        cls,
        body: Mapping[str, Any],
        *,
        tenant_id: str | None = None,
    ) -> FlowActionRequest:
        """
        Monta a requisição a partir do JSON do Flow.

        Aceita o formato da plataforma (`data`, sem session_id) e o de
        testes (`payload`, `session_id`).
        """
        action = parse_action(body.get("action"))
        flow_token = _optional_str(body.get("flow_token"))
        raw_payload = body.get("payload")
        if not isinstance(raw_payload, dict):
            raw_payload = body.get("data")
        return cls(
            action=action,
            screen=_optional_str(body.get("screen")),
            flow_token=flow_token,
            session_id=_optional_str(body.get("session_id")) or flow_token,
            payload=dict(raw_payload) if isinstance(raw_payload, dict) else {},
            tenant_id=tenant_id,
        )


@dataclass(frozen=True, slots=True)
class FlowScreenResponse:
    """
    Resposta de uma ação.

    Toda resposta de tela carrega versão, tela, dados e session_id.
    O health check devolve apenas o payload fixo de liveness.
    """

    version: str
    screen: str
    data: dict[str, Any]
    session_id: str | None = None

    @classmethod
    def health_check(cls, version: str) -> FlowScreenResponse:
        return cls(
            version=version,
            screen=VirtualState.HEALTH_CHECK.value,
            data=dict(HEALTH_CHECK_DATA),
        )

    @property
    def is_health_check(self) -> bool:
        return self.screen == VirtualState.HEALTH_CHECK.value

    def to_dict(self) -> dict[str, Any]:
        if self.is_health_check:
            return {"data": dict(self.data)}
        return {
            "version": self.version,
            "screen": self.screen,
            "data": self.data,
            "session_id": self.session_id,
        }
