"""Modelo de sessão de Flow.

Uma sessão por conversa, identificada por session_id. Guarda a tela
atual, o payload opaco recebido no INIT e a expiração. Sessões expiradas
são inertes: os stores as tratam como inexistentes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from fsm.states import VirtualState, is_terminal

DEFAULT_FLOW_ID = "default_flow"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value) if isinstance(value, str) else value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(slots=True)
class FlowSession:
    """Estado de navegação de uma conversa de Flow.

    Atributos:
        session_id: Identificador único (ecoado em toda resposta)
        flow_id: Flow token recebido no INIT
        current_screen: Tela atual ou estado virtual COMPLETED
        tenant_id: Tenant dono da conversa (quando resolvido)
        session_data: Payload opaco do INIT
        created_at / updated_at: Timestamps UTC
        expires_at: Após este instante a sessão é ignorada
    """

    session_id: str
    flow_id: str
    current_screen: str
    tenant_id: str | None = None
    session_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    expires_at: datetime | None = None

    @classmethod
    def start(
        cls,
        *,
        session_id: str,
        flow_id: str | None,
        first_screen: str,
        ttl_seconds: int,
        tenant_id: str | None = None,
        session_data: dict[str, Any] | None = None,
    ) -> FlowSession:
        """Cria sessão nova para um INIT."""
        now = _utcnow()
        return cls(
            session_id=session_id,
            flow_id=flow_id or DEFAULT_FLOW_ID,
            current_screen=first_screen,
            tenant_id=tenant_id,
            session_data=dict(session_data or {}),
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    @property
    def is_completed(self) -> bool:
        return is_terminal(self.current_screen)

    def is_expired(self, now: datetime | None = None) -> bool:
        """True se a sessão passou da expiração."""
        if self.expires_at is None:
            return False
        return (now or _utcnow()) >= self.expires_at

    def seconds_to_expiry(self, now: datetime | None = None) -> int | None:
        """Segundos restantes até expirar (mínimo 1), ou None sem expiração."""
        if self.expires_at is None:
            return None
        remaining = (self.expires_at - (now or _utcnow())).total_seconds()
        return max(1, int(remaining))

    def move_to(self, screen: str) -> None:
        """Atualiza a tela atual."""
        self.current_screen = screen
        self.updated_at = _utcnow()

    def mark_completed(self) -> None:
        """Encerra logicamente a sessão (não remove)."""
        self.move_to(VirtualState.COMPLETED.value)

    def to_dict(self) -> dict[str, Any]:
        """Serializa para persistência."""
        return {
            "session_id": self.session_id,
            "flow_id": self.flow_id,
            "current_screen": self.current_screen,
            "tenant_id": self.tenant_id,
            "session_data": self.session_data,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowSession:
        """Deserializa de persistência."""
        return cls(
            session_id=data["session_id"],
            flow_id=data.get("flow_id") or DEFAULT_FLOW_ID,
            current_screen=data["current_screen"],
            tenant_id=data.get("tenant_id"),
            session_data=data.get("session_data") or {},
            created_at=_parse_datetime(data.get("created_at")) or _utcnow(),
            updated_at=_parse_datetime(data.get("updated_at")) or _utcnow(),
            expires_at=_parse_datetime(data.get("expires_at")),
        )
