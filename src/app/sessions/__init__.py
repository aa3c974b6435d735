"""Sessões de Flow e registros de resposta."""

from app.sessions.answers import FlowAnswerRecord, build_answer_records, serialize_field_value
from app.sessions.models import DEFAULT_FLOW_ID, FlowSession

__all__ = [
    "DEFAULT_FLOW_ID",
    "FlowAnswerRecord",
    "FlowSession",
    "build_answer_records",
    "serialize_field_value",
]
