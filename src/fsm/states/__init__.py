"""
Exports públicos do módulo fsm/states.

Estados virtuais e helpers de término da máquina de ações de Flow.
"""

from fsm.states.screens import (
    TERMINAL_STATES,
    VirtualState,
    is_terminal,
)

__all__ = [
    "TERMINAL_STATES",
    "VirtualState",
    "is_terminal",
]
