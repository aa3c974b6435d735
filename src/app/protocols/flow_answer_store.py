"""Contrato do store de respostas de Flow (append-only)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.sessions.answers import FlowAnswerRecord


class FlowAnswerStoreProtocol(ABC):
    """Armazenamento de FlowAnswerRecord.

    Invariantes:
        - apenas inserção; nenhum registro é atualizado ou removido
        - reenvio do mesmo campo gera novo registro
    """

    @abstractmethod
    async def append(self, records: Sequence[FlowAnswerRecord]) -> None:
        """Insere os registros de uma submissão."""

    @abstractmethod
    async def list_by_session(self, session_id: str) -> list[FlowAnswerRecord]:
        """Retorna os registros da sessão em ordem de criação."""
