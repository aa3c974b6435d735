"""Stores de Flow no Firestore: respostas, cache de telas e tenants.

Estrutura:
    flow_answers/{record_id}               (append-only)
    flow_screen_cache/{screen_id}__{kind}  (sobrescrito a cada refresh)
    flow_tenants/{tenant_id}               (gravado sempre por inteiro)

O SDK do Firestore é síncrono; as chamadas rodam em asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.cloud.firestore_v1.base_query import FieldFilter

from app.domain.screen_data import ScreenDataCacheEntry, build_cache_key
from app.domain.tenant import TenantCredential
from app.protocols.flow_answer_store import FlowAnswerStoreProtocol
from app.protocols.screen_data_cache import ScreenDataCacheProtocol
from app.protocols.tenant_store import TenantStoreProtocol
from app.sessions.answers import FlowAnswerRecord
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

ANSWERS_COLLECTION = "flow_answers"
SCREEN_CACHE_COLLECTION = "flow_screen_cache"
TENANTS_COLLECTION = "flow_tenants"


class FirestoreFlowAnswerStore(FlowAnswerStoreProtocol):
    """Respostas de Flow, uma por documento.

    `create` falha se o documento já existir, o que garante que nenhum
    registro anterior seja sobrescrito.
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        *,
        collection: str = ANSWERS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection

    async def append(self, records: Sequence[FlowAnswerRecord]) -> None:
        if not records:
            return
        await asyncio.to_thread(self._append_sync, list(records))

    def _append_sync(self, records: list[FlowAnswerRecord]) -> None:
        collection = self._db.collection(self._collection)
        batch = self._db.batch()
        for record in records:
            doc_data = record.to_dict()
            doc_data["created_at"] = record.created_at  # timestamp nativo (ordenação/TTL)
            batch.create(collection.document(record.record_id), doc_data)
        try:
            batch.commit()
        except Exception as e:
            logger.error(
                "flow_answers_append_error",
                extra={"error_type": type(e).__name__, "record_count": len(records)},
            )
            raise FirestoreUnavailableError("Erro ao persistir respostas de flow") from e
        logger.debug(
            "flow_answers_appended",
            extra={"session_id": records[0].session_id, "record_count": len(records)},
        )

    async def list_by_session(self, session_id: str) -> list[FlowAnswerRecord]:
        return await asyncio.to_thread(self._list_by_session_sync, session_id)

    def _list_by_session_sync(self, session_id: str) -> list[FlowAnswerRecord]:
        try:
            docs = (
                self._db.collection(self._collection)
                .where(filter=FieldFilter("session_id", "==", session_id))
                .stream()
            )
            records = [FlowAnswerRecord.from_dict(doc.to_dict() or {}) for doc in docs]
        except Exception as e:
            logger.error(
                "flow_answers_list_error",
                extra={"error_type": type(e).__name__, "session_id": session_id},
            )
            raise FirestoreUnavailableError("Erro ao listar respostas de flow") from e
        return sorted(records, key=lambda record: record.created_at)


class FirestoreScreenDataCache(ScreenDataCacheProtocol):
    """Cache de dados de tela, um documento por (tela, tipo)."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        *,
        collection: str = SCREEN_CACHE_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection

    async def get(self, screen_id: str, data_kind: str) -> ScreenDataCacheEntry | None:
        return await asyncio.to_thread(self._get_sync, screen_id, data_kind)

    def _get_sync(self, screen_id: str, data_kind: str) -> ScreenDataCacheEntry | None:
        try:
            doc = (
                self._db.collection(self._collection)
                .document(build_cache_key(screen_id, data_kind))
                .get()
            )
        except Exception as e:
            raise FirestoreUnavailableError("Erro ao ler cache de dados de tela") from e
        if not doc.exists:
            return None
        try:
            return ScreenDataCacheEntry.model_validate(doc.to_dict() or {})
        except ValueError:
            # Documento corrompido conta como miss
            logger.warning(
                "screen_cache_record_invalid",
                extra={"screen_id": screen_id, "data_kind": data_kind},
            )
            return None

    async def put(self, entry: ScreenDataCacheEntry) -> None:
        await asyncio.to_thread(self._put_sync, entry)

    def _put_sync(self, entry: ScreenDataCacheEntry) -> None:
        try:
            (
                self._db.collection(self._collection)
                .document(entry.cache_key)
                .set(entry.model_dump())
            )
        except Exception as e:
            raise FirestoreUnavailableError("Erro ao gravar cache de dados de tela") from e


class FirestoreTenantStore(TenantStoreProtocol):
    """Credenciais de tenant, um documento por tenant_id."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        *,
        collection: str = TENANTS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection

    async def get(self, tenant_id: str) -> TenantCredential | None:
        return await asyncio.to_thread(self._get_sync, tenant_id)

    def _get_sync(self, tenant_id: str) -> TenantCredential | None:
        try:
            doc = self._db.collection(self._collection).document(tenant_id).get()
        except Exception as e:
            raise FirestoreUnavailableError("Erro ao ler tenant") from e
        if not doc.exists:
            return None
        return self._parse(doc.id, doc.to_dict() or {})

    async def list_candidates(
        self,
        *,
        require_public_key_uploaded: bool,
    ) -> list[TenantCredential]:
        return await asyncio.to_thread(self._list_candidates_sync, require_public_key_uploaded)

    def _list_candidates_sync(self, require_public_key_uploaded: bool) -> list[TenantCredential]:
        query = self._db.collection(self._collection).where(
            filter=FieldFilter("is_active", "==", True)
        )
        if require_public_key_uploaded:
            query = query.where(filter=FieldFilter("public_key_uploaded", "==", True))
        try:
            docs = list(query.stream())
        except Exception as e:
            raise FirestoreUnavailableError("Erro ao listar tenants candidatos") from e

        candidates: list[TenantCredential] = []
        for doc in docs:
            tenant = self._parse(doc.id, doc.to_dict() or {})
            if tenant is not None and tenant.is_resolution_candidate:
                candidates.append(tenant)
        return sorted(candidates, key=lambda tenant: tenant.tenant_id)

    async def save(self, tenant: TenantCredential) -> None:
        await asyncio.to_thread(self._save_sync, tenant)

    def _save_sync(self, tenant: TenantCredential) -> None:
        try:
            self._db.collection(self._collection).document(tenant.tenant_id).set(tenant.to_dict())
        except Exception as e:
            raise FirestoreUnavailableError("Erro ao gravar tenant") from e
        logger.info("tenant_saved", extra={"tenant_id": tenant.tenant_id})

    @staticmethod
    def _parse(doc_id: str, data: dict[str, Any]) -> TenantCredential | None:
        data.setdefault("tenant_id", doc_id)
        try:
            return TenantCredential.from_dict(data)
        except ValueError:
            logger.warning(
                "tenant_record_invalid",
                extra={"tenant_id": doc_id, "reason": "credential_invariant"},
            )
            return None
