"""Settings de sessão de flow (estado de navegação entre telas)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

FlowSessionStoreBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class FlowSessionSettings:
    """Configurações do store de sessões de flow.

    Attributes:
        ttl_seconds: Validade da sessão a partir do INIT (padrão 24h)
        store_backend: Backend do store (memory|redis)
        key_prefix: Namespace das chaves no Redis
        update_max_retries: Tentativas de update atômico sob conflito (WATCH)
    """

    ttl_seconds: int = 86400
    store_backend: FlowSessionStoreBackend = "memory"
    key_prefix: str = "flow_session:"
    update_max_retries: int = 5

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.ttl_seconds <= 0:
            errors.append("FLOW_SESSION_TTL_SECONDS deve ser > 0")

        if self.update_max_retries < 1:
            errors.append("FLOW_SESSION_UPDATE_MAX_RETRIES deve ser >= 1")

        if self.store_backend not in {"memory", "redis"}:
            errors.append(f"FLOW_SESSION_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("FLOW_SESSION_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL obrigatório quando FLOW_SESSION_STORE_BACKEND=redis")

        return errors


def _load_flow_session_from_env() -> FlowSessionSettings:
    """Carrega FlowSessionSettings de variáveis de ambiente."""
    backend_str = os.getenv("FLOW_SESSION_STORE_BACKEND", "memory").lower()
    backend: FlowSessionStoreBackend = "redis" if backend_str == "redis" else "memory"
    return FlowSessionSettings(
        ttl_seconds=int(os.getenv("FLOW_SESSION_TTL_SECONDS", "86400")),
        store_backend=backend,
        key_prefix=os.getenv("FLOW_SESSION_KEY_PREFIX", "flow_session:"),
        update_max_retries=int(os.getenv("FLOW_SESSION_UPDATE_MAX_RETRIES", "5")),
    )


@lru_cache(maxsize=1)
def get_flow_session_settings() -> FlowSessionSettings:
    """Retorna instância cacheada de FlowSessionSettings."""
    return _load_flow_session_from_env()
