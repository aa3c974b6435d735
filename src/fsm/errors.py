"""Erros terminais da máquina de ações de Flow (erro do chamador, 4xx)."""

from __future__ import annotations


class FlowActionError(Exception):
    """Base para erros de ação de Flow."""


class UnknownActionError(FlowActionError):
    """Tag de ação ausente ou não reconhecida."""

    def __init__(self, action: object) -> None:
        super().__init__(f"Unknown action: {action!r}")
        self.action = action


class SessionNotFoundError(FlowActionError):
    """Ação que exige sessão chegou sem sessão viva."""

    def __init__(self, session_id: str | None) -> None:
        super().__init__(f"Session not found: {session_id or '<missing>'}")
        self.session_id = session_id


class InvalidFlowRequestError(FlowActionError):
    """Campo obrigatório ausente para a ação (ex: tela no BACK)."""
