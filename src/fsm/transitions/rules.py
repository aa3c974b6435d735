"""
Regras por ação da máquina de Flow.

Cada ação declara se exige sessão viva e se grava respostas. O destino
da transição fica no handler da ação. O mapa é fechado: toda FlowAction
tem exatamente uma regra, verificado por validate_action_rules().
"""

from __future__ import annotations

from dataclasses import dataclass

from fsm.types.action import FlowAction


@dataclass(frozen=True, slots=True)
class ActionRule:
    """Pré-condição e efeito declarados para uma ação."""

    requires_session: bool
    records_answers: bool


# Tipagem explícita do mapa de regras
ActionRuleMap = dict[FlowAction, ActionRule]

ACTION_RULES: ActionRuleMap = {
    FlowAction.INIT: ActionRule(
        requires_session=False,
        records_answers=False,
    ),
    FlowAction.BACK: ActionRule(
        requires_session=True,
        records_answers=False,
    ),
    FlowAction.DATA_EXCHANGE: ActionRule(
        requires_session=True,
        records_answers=True,
    ),
    FlowAction.COMPLETE: ActionRule(
        requires_session=True,
        records_answers=True,
    ),
    # Ping não toca em sessão nem em stores
    FlowAction.PING: ActionRule(
        requires_session=False,
        records_answers=False,
    ),
}


def get_action_rule(action: FlowAction) -> ActionRule:
    """Retorna a regra declarada para a ação."""
    return ACTION_RULES[action]


def validate_action_rules() -> list[str]:
    """
    Valida a integridade do mapa de regras.

    Verifica:
    - Toda ação do enum tem regra
    - Ações que gravam respostas exigem sessão
    - Ping não exige sessão

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for action in FlowAction:
        if action not in ACTION_RULES:
            errors.append(f"Ação {action.name} ausente em ACTION_RULES")

    for action, rule in ACTION_RULES.items():
        if rule.records_answers and not rule.requires_session:
            errors.append(f"Ação {action.name} grava respostas sem exigir sessão")

    ping_rule = ACTION_RULES.get(FlowAction.PING)
    if ping_rule is not None and ping_rule.requires_session:
        errors.append("Ação PING não pode exigir sessão")

    return errors
