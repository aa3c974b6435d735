"""Contrato do store de sessões de Flow.

Toda mutação de uma sessão existente passa por `update`, que deve ser
um read-modify-write atômico por session_id: duas ações concorrentes
para a mesma conversa não podem perder atualização.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.sessions.models import FlowSession



class FlowSessionStoreProtocol(ABC):
    """Persistência de FlowSession com expiração."""

    @abstractmethod
    async def get(self, session_id: str) -> FlowSession | None:
        """Retorna a sessão viva, ou None se ausente/expirada."""

    @abstractmethod
    async def upsert(self, session: FlowSession) -> FlowSession:
        """Grava a sessão inteira (cria ou substitui) atomicamente."""

    @abstractmethod
    async def update(
        self,
        session_id: str,
        mutator: Callable[[FlowSession], None],
    ) -> FlowSession | None:
        """Aplica `mutator` sobre a versão atual e grava, atomicamente.

        Returns:
            Sessão atualizada, ou None se ausente/expirada (nada é gravado).
        """
