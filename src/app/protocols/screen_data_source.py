"""Contrato da fonte externa de dados de tela."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.screen_data import ScreenDataSourceConfig


class ScreenDataSourceProtocol(ABC):
    """Busca HTTP-like: método, endpoint, headers e body opcional."""

    @abstractmethod
    async def fetch(self, config: ScreenDataSourceConfig) -> Any:
        """Retorna o documento JSON da fonte.

        Raises:
            ExternalDataSourceError: Falha de rede, status de erro ou JSON inválido.
        """
