"""Endpoint de dados de Flow (data exchange).

POST /flows/data-endpoint recebe o envelope criptografado da plataforma
e responde com base64 em `text/plain`. Requests de teste em texto puro
recebem JSON, quando habilitados.

Mapeamento de erros:
- 421: chave pública desatualizada (nenhuma chave abre o envelope)
- 401: assinatura recusada
- 400: corpo malformado, ação desconhecida, sessão ou tenant inexistente
- 500: payload adulterado e falhas de store
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from app.bootstrap import get_flow_endpoint_coordinator
from app.coordinators.flows.models import FlowInbound
from app.infra.crypto import EnvelopeFormatError, FlowCryptoError, PayloadDecryptError
from app.observability import CORRELATION_HEADER, correlation_scope
from app.services.errors import SignatureMismatchError, StaleKeyError, TenantNotFoundError
from fsm.errors import InvalidFlowRequestError, SessionNotFoundError, UnknownActionError
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-hub-signature-256"
BUSINESS_ID_HEADER = "x-business-id"

# (tipo, status, kind, mensagem fixa). Ordem importa: subclasses primeiro.
# Mensagem None usa str(exc), seguro só para erros 4xx.
_ERROR_MAP: tuple[tuple[type[Exception], int, str, str | None], ...] = (
    (StaleKeyError, 421, "stale_key", None),
    (SignatureMismatchError, 401, "signature_mismatch", None),
    (TenantNotFoundError, 400, "unknown_tenant", None),
    (EnvelopeFormatError, 400, "invalid_envelope", None),
    (UnknownActionError, 400, "unknown_action", None),
    (SessionNotFoundError, 400, "session_not_found", None),
    (InvalidFlowRequestError, 400, "invalid_request", None),
    (PayloadDecryptError, 500, "decryption_failed", "Payload decryption failed"),
    (FlowCryptoError, 500, "crypto_error", "Flow encryption failed"),
    (InfrastructureError, 500, "store_unavailable", "Storage temporarily unavailable"),
)

_HANDLED_ERRORS = tuple(entry[0] for entry in _ERROR_MAP)


def _error_response(exc: Exception, correlation_id: str) -> JSONResponse:
    status_code, kind, fixed_message = 500, "internal_error", "Internal error"
    for error_type, mapped_status, mapped_kind, mapped_message in _ERROR_MAP:
        if isinstance(exc, error_type):
            status_code, kind, fixed_message = mapped_status, mapped_kind, mapped_message
            break

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "flow_request_failed",
        extra={
            "component": "flow_endpoint",
            "error_kind": kind,
            "error_type": type(exc).__name__,
            "status_code": status_code,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": kind, "message": fixed_message or str(exc)},
        headers={CORRELATION_HEADER: correlation_id},
    )


def _parse_json_body(raw_body: bytes) -> dict[str, Any] | None:
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


@router.post("/data-endpoint")
async def handle_flow_data_endpoint(request: Request) -> Response:
    """Processa uma ação de Flow e devolve a próxima tela."""
    with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
        raw_body = await request.body()
        body = _parse_json_body(raw_body)
        if body is None:
            logger.warning(
                "flow_body_invalid",
                extra={"component": "flow_endpoint", "body_size": len(raw_body)},
            )
            return JSONResponse(
                status_code=400,
                content={"error": "invalid_body", "message": "Request body must be a JSON object"},
                headers={CORRELATION_HEADER: correlation_id},
            )

        inbound = FlowInbound(
            body=body,
            raw_body=raw_body,
            signature_header=request.headers.get(SIGNATURE_HEADER),
            business_id=request.headers.get(BUSINESS_ID_HEADER),
        )
        try:
            result = await get_flow_endpoint_coordinator().handle(inbound)
        except _HANDLED_ERRORS as exc:
            return _error_response(exc, correlation_id)

        headers = {CORRELATION_HEADER: correlation_id}
        if result.encrypted:
            return PlainTextResponse(content=result.encrypted_body or "", headers=headers)
        return JSONResponse(content=result.json_body or {}, headers=headers)
