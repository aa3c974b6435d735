"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_flow_session_store: sessões de Flow (Redis, update atômico)
    - firestore_flow_stores: respostas, cache de telas e tenants (Firestore)
    - memory_stores: stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_flow_stores import (
    FirestoreFlowAnswerStore,
    FirestoreScreenDataCache,
    FirestoreTenantStore,
)
from app.infra.stores.memory_stores import (
    MemoryFlowAnswerStore,
    MemoryFlowSessionStore,
    MemoryScreenDataCache,
    MemoryTenantStore,
)
from app.infra.stores.redis_flow_session_store import RedisFlowSessionStore

__all__ = [
    "FirestoreFlowAnswerStore",
    "FirestoreScreenDataCache",
    "FirestoreTenantStore",
    "MemoryFlowAnswerStore",
    "MemoryFlowSessionStore",
    "MemoryScreenDataCache",
    "MemoryTenantStore",
    "RedisFlowSessionStore",
]
