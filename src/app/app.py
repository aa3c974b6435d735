"""Entrypoint do serviço flow_data_endpoint.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import (
    SERVICE_NAME,
    initialize_app,
    uses_firestore_backends,
    validate_runtime_settings,
)
from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from config.logging import get_logger
from config.settings import get_flow_session_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


async def _seed_firestore_health_doc(firestore_client: object) -> None:
    """Escreve documento mínimo de health para check de readiness."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": SERVICE_NAME,
            }
        )

    await asyncio.to_thread(_write_doc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa conexões exigidas pelos backends (Redis, Firestore)

    Shutdown:
    - Fecha conexão Redis
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()
    app.state.redis_required = get_flow_session_settings().store_backend == "redis"
    app.state.firestore_required = uses_firestore_backends()
    app.state.redis_client = None
    app.state.firestore_client = None

    if app.state.redis_required:
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    if app.state.firestore_required:
        try:
            app.state.firestore_client = create_firestore_client()
            await _seed_firestore_health_doc(app.state.firestore_client)
        except Exception as exc:
            logger.warning("firestore_client_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Flow Data Endpoint",
        description="Endpoint de dados para Flows criptografados",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting flow_data_endpoint in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
