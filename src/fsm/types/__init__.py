"""Tipos de entrada/saída da máquina de ações de Flow."""

from fsm.types.action import (
    HEALTH_CHECK_DATA,
    FlowAction,
    FlowActionRequest,
    FlowScreenResponse,
    parse_action,
)

__all__ = [
    "HEALTH_CHECK_DATA",
    "FlowAction",
    "FlowActionRequest",
    "FlowScreenResponse",
    "parse_action",
]
