"""
Roteamento de telas após DATA_EXCHANGE.

O roteador recebe a sessão, a tela que submeteu e as respostas e
devolve a próxima tela. None significa que o Flow terminou.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.sessions.models import FlowSession

RouteResult = str | None

ScreenRouter = Callable[
    ["FlowSession", str, Mapping[str, Any]],
    RouteResult | Awaitable[RouteResult],
]


def no_routing(
    session: FlowSession,
    screen: str,
    answers: Mapping[str, Any],
) -> RouteResult:
    """Roteador padrão: todo DATA_EXCHANGE encerra o Flow."""
    return None


def static_routes(routes: Mapping[str, str]) -> ScreenRouter:
    """
    Cria roteador a partir de um mapa tela de origem → próxima tela.

    Telas sem entrada encerram o Flow.
    """
    table = dict(routes)

    def _route(
        session: FlowSession,
        screen: str,
        answers: Mapping[str, Any],
    ) -> RouteResult:
        return table.get(screen)

    return _route


async def resolve_route(
    router: ScreenRouter,
    session: FlowSession,
    screen: str,
    answers: Mapping[str, Any],
) -> RouteResult:
    """Executa o roteador (síncrono ou assíncrono) e normaliza o resultado."""
    result = router(session, screen, answers)
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return None
    next_screen = str(result).strip()
    return next_screen or None
