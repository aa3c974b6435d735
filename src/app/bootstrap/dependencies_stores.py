"""Factories de stores de Flow baseadas nas settings de backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.stores import (
    FirestoreFlowAnswerStore,
    FirestoreScreenDataCache,
    FirestoreTenantStore,
    MemoryFlowAnswerStore,
    MemoryFlowSessionStore,
    MemoryScreenDataCache,
    MemoryTenantStore,
    RedisFlowSessionStore,
)
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_flow_session_settings,
    get_flow_store_settings,
)

if TYPE_CHECKING:
    from app.protocols import (
        FlowAnswerStoreProtocol,
        FlowSessionStoreProtocol,
        ScreenDataCacheProtocol,
        TenantStoreProtocol,
    )

logger = logging.getLogger(__name__)


def _warn_memory_outside_dev(store_name: str) -> None:
    base = get_base_settings()
    if not base.is_development:
        logger.warning(
            "memory_store_in_non_dev",
            extra={
                "component": "bootstrap",
                "store": store_name,
                "backend": "memory",
                "environment": base.environment,
            },
        )


def create_flow_session_store() -> FlowSessionStoreProtocol:
    """Cria store de sessão de Flow (FLOW_SESSION_STORE_BACKEND)."""
    settings = get_flow_session_settings()
    backend = settings.store_backend

    if backend == "redis":
        store: FlowSessionStoreProtocol = RedisFlowSessionStore(
            create_async_redis_client(),
            key_prefix=settings.key_prefix,
            max_retries=settings.update_max_retries,
        )
    elif backend == "memory":
        _warn_memory_outside_dev("flow_session")
        store = MemoryFlowSessionStore()
    else:
        msg = f"FLOW_SESSION_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("flow_session_store_created", extra={"component": "bootstrap", "backend": backend})
    return store


def create_flow_answer_store() -> FlowAnswerStoreProtocol:
    """Cria store append-only de respostas (FLOW_ANSWER_STORE_BACKEND)."""
    backend = get_flow_store_settings().answer_store_backend

    if backend == "firestore":
        store: FlowAnswerStoreProtocol = FirestoreFlowAnswerStore(
            create_firestore_client(),
            collection=get_firestore_settings().collection_answers,
        )
    elif backend == "memory":
        _warn_memory_outside_dev("flow_answers")
        store = MemoryFlowAnswerStore()
    else:
        msg = f"FLOW_ANSWER_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("flow_answer_store_created", extra={"component": "bootstrap", "backend": backend})
    return store


def create_screen_data_cache() -> ScreenDataCacheProtocol:
    """Cria cache de dados de tela (FLOW_SCREEN_CACHE_BACKEND)."""
    backend = get_flow_store_settings().screen_cache_backend

    if backend == "firestore":
        store: ScreenDataCacheProtocol = FirestoreScreenDataCache(
            create_firestore_client(),
            collection=get_firestore_settings().collection_screen_cache,
        )
    elif backend == "memory":
        store = MemoryScreenDataCache()
    else:
        msg = f"FLOW_SCREEN_CACHE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("screen_data_cache_created", extra={"component": "bootstrap", "backend": backend})
    return store


def create_tenant_store() -> TenantStoreProtocol:
    """Cria store de credenciais de tenant (FLOW_TENANT_STORE_BACKEND)."""
    backend = get_flow_store_settings().tenant_store_backend

    if backend == "firestore":
        store: TenantStoreProtocol = FirestoreTenantStore(
            create_firestore_client(),
            collection=get_firestore_settings().collection_tenants,
        )
    elif backend == "memory":
        _warn_memory_outside_dev("flow_tenants")
        store = MemoryTenantStore()
    else:
        msg = f"FLOW_TENANT_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("tenant_store_created", extra={"component": "bootstrap", "backend": backend})
    return store
