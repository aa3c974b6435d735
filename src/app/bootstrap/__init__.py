"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos. Os getters cacheados
são o único ponto de instanciação; os componentes recebem suas
dependências por construtor.

Uso:
    from app.bootstrap import initialize_app, get_flow_endpoint_coordinator

    # Na inicialização do serviço
    initialize_app()

    # Pipeline do endpoint
    coordinator = get_flow_endpoint_coordinator()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_flow_endpoint_settings,
    get_flow_session_settings,
    get_flow_store_settings,
)

if TYPE_CHECKING:
    from app.coordinators.flows.endpoint import FlowEndpointCoordinator
    from app.protocols import (
        FlowAnswerStoreProtocol,
        FlowSessionStoreProtocol,
        ScreenDataCacheProtocol,
        TenantStoreProtocol,
    )
    from app.services.screen_data_provider import ScreenDataProvider
    from app.services.signature_policy import SignatureVerifier
    from app.services.tenant_resolver import TenantKeyResolver
    from fsm.manager import FlowActionStateMachine

# Nome do serviço para logs
SERVICE_NAME = "flow_data_endpoint"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço. Configura logging
    estruturado JSON com correlation_id.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def uses_firestore_backends() -> bool:
    stores = get_flow_store_settings()
    return "firestore" in {
        stores.answer_store_backend,
        stores.screen_cache_backend,
        stores.tenant_store_backend,
    }


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings."""
    base = get_base_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"flow_session: {error}" for error in get_flow_session_settings().validate(base))
    errors.extend(f"flow_stores: {error}" for error in get_flow_store_settings().validate(base))
    errors.extend(f"flow_endpoint: {error}" for error in get_flow_endpoint_settings().validate(base))

    if uses_firestore_backends():
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = base.strict_validation
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Store Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_flow_session_store() -> FlowSessionStoreProtocol:
    """Obtém store de sessões de Flow (singleton)."""
    from app.bootstrap.dependencies_stores import create_flow_session_store
    return create_flow_session_store()


@lru_cache(maxsize=1)
def get_flow_answer_store() -> FlowAnswerStoreProtocol:
    """Obtém store de respostas (singleton)."""
    from app.bootstrap.dependencies_stores import create_flow_answer_store
    return create_flow_answer_store()


@lru_cache(maxsize=1)
def get_screen_data_cache() -> ScreenDataCacheProtocol:
    """Obtém cache de dados de tela (singleton)."""
    from app.bootstrap.dependencies_stores import create_screen_data_cache
    return create_screen_data_cache()


@lru_cache(maxsize=1)
def get_tenant_store() -> TenantStoreProtocol:
    """Obtém store de credenciais de tenant (singleton)."""
    from app.bootstrap.dependencies_stores import create_tenant_store
    return create_tenant_store()


# ──────────────────────────────────────────────────────────────────────────────
# Service Getters
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_signature_verifier() -> SignatureVerifier:
    """Obtém verificador de assinatura (política fixa no startup)."""
    from app.bootstrap.dependencies import create_signature_verifier
    return create_signature_verifier()


@lru_cache(maxsize=1)
def get_tenant_resolver() -> TenantKeyResolver:
    """Obtém resolvedor de tenant (singleton)."""
    from app.bootstrap.dependencies import create_tenant_resolver
    return create_tenant_resolver(get_tenant_store(), get_signature_verifier())


@lru_cache(maxsize=1)
def get_screen_data_provider() -> ScreenDataProvider:
    """Obtém provedor de dados de tela (singleton)."""
    from app.bootstrap.dependencies import create_screen_data_provider
    return create_screen_data_provider(get_screen_data_cache())


@lru_cache(maxsize=1)
def get_flow_state_machine() -> FlowActionStateMachine:
    """Obtém máquina de ações de Flow (singleton)."""
    from app.bootstrap.dependencies import create_state_machine
    return create_state_machine(
        get_flow_session_store(),
        get_flow_answer_store(),
        get_screen_data_provider(),
    )


@lru_cache(maxsize=1)
def get_flow_endpoint_coordinator() -> FlowEndpointCoordinator:
    """Obtém coordinator do endpoint de dados de Flow (singleton)."""
    from app.bootstrap.dependencies import create_flow_endpoint_coordinator
    return create_flow_endpoint_coordinator(
        resolver=get_tenant_resolver(),
        state_machine=get_flow_state_machine(),
    )
