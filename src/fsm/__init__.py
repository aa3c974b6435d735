"""
Módulo FSM — máquina de ações do protocolo de Flow.

Estrutura:
    - states/: Estados virtuais (COMPLETED, HEALTH_CHECK)
    - types/: FlowAction, FlowActionRequest, FlowScreenResponse
    - transitions/: Regras por ação (ACTION_RULES)
    - rules/: Roteamento de telas após DATA_EXCHANGE
    - manager/: FlowActionStateMachine (importar de fsm.manager)

fsm.manager depende de app.sessions, que depende de fsm.states;
por isso o manager não é reexportado aqui.
"""

from fsm.errors import (
    FlowActionError,
    InvalidFlowRequestError,
    SessionNotFoundError,
    UnknownActionError,
)
from fsm.rules import ScreenRouter, no_routing, static_routes
from fsm.states import TERMINAL_STATES, VirtualState, is_terminal
from fsm.transitions import ACTION_RULES, ActionRule, validate_action_rules
from fsm.types import (
    FlowAction,
    FlowActionRequest,
    FlowScreenResponse,
    parse_action,
)

__all__ = [
    "ACTION_RULES",
    "TERMINAL_STATES",
    "ActionRule",
    "FlowAction",
    "FlowActionError",
    "FlowActionRequest",
    "FlowScreenResponse",
    "InvalidFlowRequestError",
    "ScreenRouter",
    "SessionNotFoundError",
    "UnknownActionError",
    "VirtualState",
    "is_terminal",
    "no_routing",
    "parse_action",
    "static_routes",
    "validate_action_rules",
]
