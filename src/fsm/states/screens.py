"""
Estados da máquina de ações de Flow.

Os estados são identificadores de tela (strings livres definidas pelo
JSON do Flow) mais dois estados virtuais: COMPLETED, que marca a sessão
encerrada, e HEALTH_CHECK, estado sintético da ação de ping.
"""

from enum import StrEnum


class VirtualState(StrEnum):
    """Estados que não correspondem a uma tela do Flow."""

    COMPLETED = "COMPLETED"
    HEALTH_CHECK = "HEALTH_CHECK"

    def __str__(self) -> str:
        return self.value


# Uma sessão em estado terminal não volta a navegar
TERMINAL_STATES: frozenset[str] = frozenset({VirtualState.COMPLETED.value})


def is_terminal(screen: str) -> bool:
    """
    Verifica se o identificador de tela marca sessão encerrada.

    Args:
        screen: Tela atual da sessão

    Returns:
        True se a sessão está em estado terminal
    """
    return screen in TERMINAL_STATES

