"""Settings do Firestore (stores documentais de flow)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: ID do projeto GCP (usa GCP_PROJECT se não definido)
        collection_tenants: Credenciais de tenant
        collection_answers: Respostas de flow (append-only)
        collection_screen_cache: Cache de dados de tela
    """

    project_id: str = ""
    collection_tenants: str = "flow_tenants"
    collection_answers: str = "flow_answers"
    collection_screen_cache: str = "flow_screen_cache"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida configurações do Firestore.

        Args:
            gcp_project: Projeto GCP padrão para fallback.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []
        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")

        collections = (
            self.collection_tenants,
            self.collection_answers,
            self.collection_screen_cache,
        )
        if len(set(collections)) != len(collections):
            errors.append("Collections do Firestore devem ser distintas")
        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    """Carrega FirestoreSettings de variáveis de ambiente."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_tenants=os.getenv("FIRESTORE_COLLECTION_TENANTS", "flow_tenants"),
        collection_answers=os.getenv("FIRESTORE_COLLECTION_ANSWERS", "flow_answers"),
        collection_screen_cache=os.getenv(
            "FIRESTORE_COLLECTION_SCREEN_CACHE", "flow_screen_cache"
        ),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
