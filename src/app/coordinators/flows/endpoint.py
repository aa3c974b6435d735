"""Coordenação do endpoint de dados de Flow.

Pipeline de uma requisição criptografada:

    envelope → (assinatura + resolução de tenant + descriptografia)
             → máquina de ações → resposta cifrada com IV complementado

Requisições em texto puro (testes manuais) pulam a criptografia e só são
aceitas quando habilitadas em configuração.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.crypto import decode_envelope, encrypt_flow_response, is_encrypted_envelope
from fsm.errors import InvalidFlowRequestError
from fsm.types.action import FlowAction, FlowActionRequest

from .models import FlowEndpointResult, FlowInbound

if TYPE_CHECKING:
    from app.services.tenant_resolver import ResolvedTenant, TenantKeyResolver
    from fsm.manager.machine import FlowActionStateMachine

logger = logging.getLogger(__name__)

BUSINESS_ID_FIELD = "business_id"


def _explicit_tenant_id(inbound: FlowInbound) -> str | None:
    """Tenant explícito: header X-Business-Id, senão campo business_id."""
    candidate: Any = inbound.business_id or inbound.body.get(BUSINESS_ID_FIELD)
    if candidate is None:
        return None
    text = str(candidate).strip()
    return text or None


class FlowEndpointCoordinator:
    """Orquestra resolução, máquina de ações e codec de transporte.

    Não conhece HTTP: recebe FlowInbound e devolve FlowEndpointResult.
    Erros de domínio são propagados para a rota mapear em status.
    """

    def __init__(
        self,
        *,
        resolver: TenantKeyResolver,
        state_machine: FlowActionStateMachine,
        allow_plaintext: bool = False,
    ) -> None:
        self._resolver = resolver
        self._state_machine = state_machine
        self._allow_plaintext = allow_plaintext

    @property
    def allow_plaintext(self) -> bool:
        return self._allow_plaintext

    async def handle(self, inbound: FlowInbound) -> FlowEndpointResult:
        """Processa a requisição (criptografada ou texto puro)."""
        if is_encrypted_envelope(inbound.body):
            return await self._handle_encrypted(inbound)
        return await self._handle_plaintext(inbound)

    async def _resolve(self, inbound: FlowInbound) -> ResolvedTenant:
        envelope = decode_envelope(inbound.body)
        tenant_id = _explicit_tenant_id(inbound)
        if tenant_id:
            return await self._resolver.resolve_explicit(
                tenant_id,
                envelope,
                raw_body=inbound.raw_body,
                signature_header=inbound.signature_header,
            )
        return await self._resolver.resolve(
            envelope,
            raw_body=inbound.raw_body,
            signature_header=inbound.signature_header,
        )

    async def _handle_encrypted(self, inbound: FlowInbound) -> FlowEndpointResult:
        resolved = await self._resolve(inbound)
        tenant_id = resolved.tenant.tenant_id

        request = FlowActionRequest.from_payload(resolved.request.payload, tenant_id=tenant_id)
        response = await self._state_machine.handle(request)

        encrypted_body = encrypt_flow_response(
            response=response.to_dict(),
            aes_key=resolved.request.aes_key,
            iv=resolved.request.iv,
        )
        logger.info(
            "flow_request_processed",
            extra={
                "component": "flow_endpoint",
                "tenant_id": tenant_id,
                "action": request.action.value,
                "screen": response.screen,
                "resolution_attempts": resolved.attempts,
                "explicit_tenant": resolved.explicit,
            },
        )
        return FlowEndpointResult(
            encrypted=True,
            encrypted_body=encrypted_body,
            tenant_id=tenant_id,
            screen=response.screen,
        )

    async def _handle_plaintext(self, inbound: FlowInbound) -> FlowEndpointResult:
        if not self._allow_plaintext:
            logger.warning(
                "plaintext_request_rejected",
                extra={"component": "flow_endpoint"},
            )
            raise InvalidFlowRequestError("Encrypted flow envelope required")

        tenant_id = _explicit_tenant_id(inbound)
        request = FlowActionRequest.from_payload(inbound.body, tenant_id=tenant_id)
        if request.action is not FlowAction.PING and not request.screen:
            raise InvalidFlowRequestError("Missing required field: screen")

        response = await self._state_machine.handle(request)
        logger.info(
            "flow_plaintext_request_processed",
            extra={
                "component": "flow_endpoint",
                "tenant_id": tenant_id,
                "action": request.action.value,
                "screen": response.screen,
            },
        )
        return FlowEndpointResult(
            encrypted=False,
            json_body=response.to_dict(),
            tenant_id=tenant_id,
            screen=response.screen,
        )
