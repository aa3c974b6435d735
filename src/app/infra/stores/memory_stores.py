"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

from app.domain.screen_data import ScreenDataCacheEntry, build_cache_key
from app.domain.tenant import TenantCredential
from app.protocols.flow_answer_store import FlowAnswerStoreProtocol
from app.protocols.flow_session_store import FlowSessionStoreProtocol
from app.protocols.screen_data_cache import ScreenDataCacheProtocol
from app.protocols.tenant_store import TenantStoreProtocol
from app.sessions.answers import FlowAnswerRecord
from app.sessions.models import FlowSession

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class MemoryFlowSessionStore(FlowSessionStoreProtocol):
    """Sessões serializadas em dict; o lock serializa read-modify-write."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}  # session_id -> json
        self._lock = asyncio.Lock()

    def _load(self, session_id: str) -> FlowSession | None:
        data = self._store.get(session_id)
        if data is None:
            return None
        session = FlowSession.from_dict(json.loads(data))
        if session.is_expired():
            del self._store[session_id]
            return None
        return session

    async def get(self, session_id: str) -> FlowSession | None:
        async with self._lock:
            return self._load(session_id)

    async def upsert(self, session: FlowSession) -> FlowSession:
        async with self._lock:
            self._store[session.session_id] = json.dumps(session.to_dict())
        return session

    async def update(
        self,
        session_id: str,
        mutator: Callable[[FlowSession], None],
    ) -> FlowSession | None:
        async with self._lock:
            session = self._load(session_id)
            if session is None:
                return None
            mutator(session)
            self._store[session_id] = json.dumps(session.to_dict())
            return session

    def __len__(self) -> int:
        return len(self._store)


class MemoryFlowAnswerStore(FlowAnswerStoreProtocol):
    """Lista append-only de registros de resposta."""

    def __init__(self) -> None:
        self._records: list[FlowAnswerRecord] = []

    async def append(self, records: Sequence[FlowAnswerRecord]) -> None:
        self._records.extend(records)

    async def list_by_session(self, session_id: str) -> list[FlowAnswerRecord]:
        return [record for record in self._records if record.session_id == session_id]

    @property
    def records(self) -> list[FlowAnswerRecord]:
        """Cópia de todos os registros (para testes)."""
        return list(self._records)


class MemoryScreenDataCache(ScreenDataCacheProtocol):
    """Cache de dados de tela em dict."""

    def __init__(self) -> None:
        self._entries: dict[str, ScreenDataCacheEntry] = {}

    async def get(self, screen_id: str, data_kind: str) -> ScreenDataCacheEntry | None:
        return self._entries.get(build_cache_key(screen_id, data_kind))

    async def put(self, entry: ScreenDataCacheEntry) -> None:
        self._entries[entry.cache_key] = entry


class MemoryTenantStore(TenantStoreProtocol):
    """Tenants em dict, preservando a ordem de inserção."""

    def __init__(self, tenants: Sequence[TenantCredential] = ()) -> None:
        self._tenants: dict[str, TenantCredential] = {t.tenant_id: t for t in tenants}

    async def get(self, tenant_id: str) -> TenantCredential | None:
        return self._tenants.get(tenant_id)

    async def list_candidates(
        self,
        *,
        require_public_key_uploaded: bool,
    ) -> list[TenantCredential]:
        return [
            tenant
            for tenant in self._tenants.values()
            if tenant.is_resolution_candidate
            and (tenant.public_key_uploaded or not require_public_key_uploaded)
        ]

    async def save(self, tenant: TenantCredential) -> None:
        self._tenants[tenant.tenant_id] = tenant
