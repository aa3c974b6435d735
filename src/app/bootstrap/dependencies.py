"""Wiring dos serviços do endpoint de Flow.

Conecta stores, resolvedor de tenant, provedor de dados de tela e a
máquina de ações conforme as settings carregadas no startup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.coordinators.flows.endpoint import FlowEndpointCoordinator
from app.infra.screen_data import HttpScreenDataSource
from app.services.screen_data_provider import ScreenDataProvider, build_source_configs
from app.services.signature_policy import SignaturePolicy, SignatureVerifier
from app.services.tenant_resolver import TenantKeyResolver
from config.settings import get_flow_endpoint_settings, get_flow_session_settings
from fsm.manager import FlowActionStateMachine, create_flow_state_machine

if TYPE_CHECKING:
    from app.protocols import (
        FlowAnswerStoreProtocol,
        FlowSessionStoreProtocol,
        ScreenDataCacheProtocol,
        TenantStoreProtocol,
    )
    from fsm.rules import ScreenRouter

logger = logging.getLogger(__name__)


def create_signature_verifier() -> SignatureVerifier:
    """Cria verificador com a política lida uma vez das settings."""
    policy = SignaturePolicy(get_flow_endpoint_settings().signature_policy)
    logger.info(
        "signature_policy_configured",
        extra={"component": "bootstrap", "policy": policy.value},
    )
    return SignatureVerifier(policy)


def create_tenant_resolver(
    tenant_store: TenantStoreProtocol,
    verifier: SignatureVerifier,
) -> TenantKeyResolver:
    """Cria resolvedor de tenant com o limite de candidatos configurado."""
    return TenantKeyResolver(
        tenant_store,
        verifier,
        max_candidates=get_flow_endpoint_settings().resolution_max_candidates,
    )


def create_screen_data_provider(cache: ScreenDataCacheProtocol) -> ScreenDataProvider:
    """Cria provedor de dados de tela.

    A fonte HTTP só é criada quando FLOW_SCREEN_DATA_SOURCES registra
    alguma tela ou quando as rotas administrativas podem registrar fontes
    em runtime (FLOW_ADMIN_TOKEN).
    """
    settings = get_flow_endpoint_settings()
    source_configs = build_source_configs(settings.screen_data_sources)
    source = (
        HttpScreenDataSource(timeout_seconds=settings.screen_data_timeout_seconds)
        if source_configs or settings.admin_token
        else None
    )
    logger.info(
        "screen_data_provider_created",
        extra={"component": "bootstrap", "registered_screens": sorted(source_configs)},
    )
    return ScreenDataProvider(
        cache,
        source,
        source_configs,
        timeout_seconds=settings.screen_data_timeout_seconds,
    )


def create_state_machine(
    session_store: FlowSessionStoreProtocol,
    answer_store: FlowAnswerStoreProtocol,
    screen_data_provider: ScreenDataProvider,
    router: ScreenRouter | None = None,
) -> FlowActionStateMachine:
    """Cria máquina de ações com versão, telas e TTL das settings."""
    settings = get_flow_endpoint_settings()
    return create_flow_state_machine(
        session_store,
        answer_store,
        screen_data_provider,
        protocol_version=settings.protocol_version,
        first_screen=settings.first_screen,
        completion_screen=settings.completion_screen,
        session_ttl_seconds=get_flow_session_settings().ttl_seconds,
        router=router,
    )


def create_flow_endpoint_coordinator(
    *,
    resolver: TenantKeyResolver,
    state_machine: FlowActionStateMachine,
) -> FlowEndpointCoordinator:
    """Cria coordinator do endpoint com o flag de texto puro."""
    allow_plaintext = get_flow_endpoint_settings().allow_plaintext_requests
    if allow_plaintext:
        logger.warning(
            "plaintext_requests_enabled",
            extra={"component": "bootstrap"},
        )
    return FlowEndpointCoordinator(
        resolver=resolver,
        state_machine=state_machine,
        allow_plaintext=allow_plaintext,
    )
