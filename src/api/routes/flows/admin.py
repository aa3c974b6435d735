"""Rotas administrativas de Flow (chamadas pelo backend do operador).

- POST /flows/screen-data/{screen_id}: grava opções estáticas da tela e,
  opcionalmente, registra a fonte externa (`api_config`)
- GET  /flows/screen-data/{screen_id}: opções servidas hoje para a tela
- GET  /flows/responses/{session_id}: respostas gravadas da sessão
- GET  /flows/sessions/{session_id}: estado atual da sessão

Todas exigem o header X-Admin-Token igual a FLOW_ADMIN_TOKEN. Sem token
configurado, as rotas respondem 403.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from app.bootstrap import get_flow_answer_store, get_flow_session_store, get_screen_data_provider
from app.domain.screen_data import DEFAULT_DATA_KIND, ScreenDataSourceConfig
from config.settings import get_flow_endpoint_settings
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

ADMIN_TOKEN_HEADER = "x-admin-token"


class ScreenDataSeedRequest(BaseModel):
    """Corpo do POST de dados de tela."""

    options: list[dict[str, Any]] = Field(default_factory=list)
    api_config: dict[str, Any] | None = None
    data_kind: str = Field(default=DEFAULT_DATA_KIND, min_length=1)


def _error(status_code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": kind, "message": message})


def _check_admin_token(request: Request) -> JSONResponse | None:
    expected = get_flow_endpoint_settings().admin_token
    if not expected:
        return _error(403, "admin_disabled", "Admin routes are disabled")
    provided = request.headers.get(ADMIN_TOKEN_HEADER, "")
    if not hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8", "replace")):
        logger.warning("flow_admin_unauthorized", extra={"component": "flow_admin"})
        return _error(401, "unauthorized", "Invalid admin token")
    return None


def _store_failure(exc: InfrastructureError, operation: str) -> JSONResponse:
    logger.error(
        "flow_admin_store_failed",
        extra={
            "component": "flow_admin",
            "operation": operation,
            "error_type": type(exc).__name__,
        },
    )
    return _error(500, "store_unavailable", "Storage temporarily unavailable")


@router.post("/screen-data/{screen_id}")
async def seed_screen_data(screen_id: str, request: Request) -> Response:
    """Grava opções da tela e registra a fonte externa quando enviada."""
    denied = _check_admin_token(request)
    if denied is not None:
        return denied

    try:
        seed = ScreenDataSeedRequest.model_validate_json(await request.body())
        source_config = (
            ScreenDataSourceConfig.model_validate({"data_kind": seed.data_kind, **seed.api_config})
            if seed.api_config is not None
            else None
        )
        provider = get_screen_data_provider()
        entry = await provider.seed_options(
            screen_id,
            seed.options,
            data_kind=seed.data_kind,
            source_config=source_config,
        )
    except ValidationError as exc:
        return _error(400, "invalid_body", f"{exc.error_count()} invalid field(s)")
    except InfrastructureError as exc:
        return _store_failure(exc, "seed_screen_data")

    return JSONResponse(
        content={
            "success": True,
            "screen_id": screen_id,
            "data_kind": entry.data_kind,
            "option_count": len(entry.options),
            "source_registered": source_config is not None,
        }
    )


@router.get("/screen-data/{screen_id}")
async def read_screen_data(
    screen_id: str,
    request: Request,
    data_kind: str = DEFAULT_DATA_KIND,
) -> Response:
    """Opções da tela como o endpoint de dados as serviria."""
    denied = _check_admin_token(request)
    if denied is not None:
        return denied

    options = await get_screen_data_provider().get_options(screen_id, data_kind)
    return JSONResponse(content={"screen_id": screen_id, "data_kind": data_kind, "data": options})


@router.get("/responses/{session_id}")
async def list_session_responses(session_id: str, request: Request) -> Response:
    """Respostas da sessão em ordem de gravação (inclui reenvios)."""
    denied = _check_admin_token(request)
    if denied is not None:
        return denied

    try:
        records = await get_flow_answer_store().list_by_session(session_id)
    except InfrastructureError as exc:
        return _store_failure(exc, "list_responses")

    return JSONResponse(
        content={
            "session_id": session_id,
            "responses": [record.to_dict() for record in records],
        }
    )


@router.get("/sessions/{session_id}")
async def read_session(session_id: str, request: Request) -> Response:
    denied = _check_admin_token(request)
    if denied is not None:
        return denied

    try:
        session = await get_flow_session_store().get(session_id)
    except InfrastructureError as exc:
        return _store_failure(exc, "read_session")

    if session is None:
        return _error(404, "session_not_found", "Session not found or expired")
    return JSONResponse(content={"session": session.to_dict(), "completed": session.is_completed})
