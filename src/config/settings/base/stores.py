"""Settings de backend dos stores de respostas, cache de telas e tenants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DocumentStoreBackend = Literal["memory", "firestore"]

_VALID_BACKENDS = ("memory", "firestore")


@dataclass(frozen=True)
class FlowStoreSettings:
    """Backends dos stores documentais.

    Attributes:
        answer_store_backend: Respostas de flow (append-only)
        screen_cache_backend: Cache de dados de tela
        tenant_store_backend: Credenciais de tenant
    """

    answer_store_backend: DocumentStoreBackend = "memory"
    screen_cache_backend: DocumentStoreBackend = "memory"
    tenant_store_backend: DocumentStoreBackend = "memory"

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []
        backends = {
            "FLOW_ANSWER_STORE_BACKEND": self.answer_store_backend,
            "FLOW_SCREEN_CACHE_BACKEND": self.screen_cache_backend,
            "FLOW_TENANT_STORE_BACKEND": self.tenant_store_backend,
        }
        for env_name, backend in backends.items():
            if backend not in _VALID_BACKENDS:
                errors.append(f"{env_name} inválido: {backend}")
            elif backend == "memory" and not base.is_development:
                errors.append(f"{env_name}=memory proibido em staging/production")
        return errors


def _parse_backend(env_name: str) -> DocumentStoreBackend:
    value = os.getenv(env_name, "memory").lower()
    return "firestore" if value == "firestore" else "memory"


def _load_flow_stores_from_env() -> FlowStoreSettings:
    """Carrega FlowStoreSettings de variáveis de ambiente."""
    return FlowStoreSettings(
        answer_store_backend=_parse_backend("FLOW_ANSWER_STORE_BACKEND"),
        screen_cache_backend=_parse_backend("FLOW_SCREEN_CACHE_BACKEND"),
        tenant_store_backend=_parse_backend("FLOW_TENANT_STORE_BACKEND"),
    )


@lru_cache(maxsize=1)
def get_flow_store_settings() -> FlowStoreSettings:
    """Retorna instância cacheada de FlowStoreSettings."""
    return _load_flow_stores_from_env()
