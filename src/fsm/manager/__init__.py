"""
Exports públicos do módulo fsm/manager.

Máquina de ações de Flow (FlowActionStateMachine).
"""

from fsm.manager.machine import (
    COMPLETION_MESSAGE,
    FlowActionStateMachine,
    create_flow_state_machine,
    validate_handler_map,
)

__all__ = [
    "COMPLETION_MESSAGE",
    "FlowActionStateMachine",
    "create_flow_state_machine",
    "validate_handler_map",
]
