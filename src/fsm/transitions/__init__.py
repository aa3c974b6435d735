"""
Exports públicos do módulo fsm/transitions.

Regras declarativas por ação de Flow.
"""

from fsm.transitions.rules import (
    ACTION_RULES,
    ActionRule,
    ActionRuleMap,
    get_action_rule,
    validate_action_rules,
)

__all__ = [
    "ACTION_RULES",
    "ActionRule",
    "ActionRuleMap",
    "get_action_rule",
    "validate_action_rules",
]
