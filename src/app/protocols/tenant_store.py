"""Contrato do store de credenciais de tenant."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.tenant import TenantCredential


class TenantStoreProtocol(ABC):
    """Lookup de tenants por id e por filtro de credencial."""

    @abstractmethod
    async def get(self, tenant_id: str) -> TenantCredential | None:
        """Retorna o tenant pelo id (ativo ou não)."""

    @abstractmethod
    async def list_candidates(
        self,
        *,
        require_public_key_uploaded: bool,
    ) -> list[TenantCredential]:
        """Tenants ativos com credencial completa, em ordem estável.

        Args:
            require_public_key_uploaded: Restringe a tenants cuja chave
                pública foi confirmada pela plataforma.
        """

    @abstractmethod
    async def save(self, tenant: TenantCredential) -> None:
        """Grava o registro inteiro (nunca atualização parcial)."""
