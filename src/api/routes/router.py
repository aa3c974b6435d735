"""Agregador de rotas.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.flows.admin import router as flows_admin_router
from api.routes.flows.router import router as flows_router
from api.routes.health.router import router as health_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        flows_router,
        prefix="/flows",
        tags=["flows"],
    )

    api_router.include_router(
        flows_admin_router,
        prefix="/flows",
        tags=["flows-admin"],
    )

    return api_router
