"""Registros de resposta de Flow (append-only).

Um registro por (sessão, tela, campo) a cada submissão. Reenvio do mesmo
campo gera novo registro; registros antigos nunca são alterados.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.sessions.models import FlowSession


@dataclass(frozen=True, slots=True)
class FlowAnswerRecord:
    """Valor submetido para um campo, com cópia do conjunto completo.

    Attributes:
        record_id: Id único do registro
        session_id: Sessão de origem
        flow_id: Flow token da sessão
        screen_id: Tela em que o campo foi submetido
        field_name: Nome do campo
        field_value: Valor (strings como vieram; demais tipos em JSON)
        response_data: Todas as respostas da submissão
        created_at: Momento da submissão (UTC)
    """

    session_id: str
    flow_id: str
    screen_id: str
    field_name: str
    field_value: str
    response_data: dict[str, Any] = field(default_factory=dict)
    record_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "session_id": self.session_id,
            "flow_id": self.flow_id,
            "screen_id": self.screen_id,
            "field_name": self.field_name,
            "field_value": self.field_value,
            "response_data": self.response_data,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowAnswerRecord:
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if not isinstance(created_at, datetime):
            created_at = datetime.now(UTC)
        return cls(
            record_id=data.get("record_id") or uuid.uuid4().hex,
            session_id=data["session_id"],
            flow_id=data.get("flow_id", ""),
            screen_id=data.get("screen_id", ""),
            field_name=data["field_name"],
            field_value=data.get("field_value", ""),
            response_data=data.get("response_data") or {},
            created_at=created_at,
        )


def serialize_field_value(value: Any) -> str:
    """Strings passam direto; demais valores viram JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def build_answer_records(
    session: FlowSession,
    screen_id: str,
    answers: Mapping[str, Any],
) -> list[FlowAnswerRecord]:
    """Gera um registro por campo submetido na tela."""
    snapshot = dict(answers)
    created_at = datetime.now(UTC)
    return [
        FlowAnswerRecord(
            session_id=session.session_id,
            flow_id=session.flow_id,
            screen_id=screen_id,
            field_name=str(field_name),
            field_value=serialize_field_value(value),
            response_data=snapshot,
            created_at=created_at,
        )
        for field_name, value in answers.items()
    ]
