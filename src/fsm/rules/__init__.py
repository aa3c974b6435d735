"""
Exports públicos do módulo fsm/rules.

Roteamento de telas do Flow.
"""

from fsm.rules.routing import (
    RouteResult,
    ScreenRouter,
    no_routing,
    resolve_route,
    static_routes,
)

__all__ = [
    "RouteResult",
    "ScreenRouter",
    "no_routing",
    "resolve_route",
    "static_routes",
]
