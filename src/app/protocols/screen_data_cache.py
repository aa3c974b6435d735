"""Contrato do cache de dados de tela."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.screen_data import ScreenDataCacheEntry


class ScreenDataCacheProtocol(ABC):
    """Cache (tela, tipo de dado) -> opções, sobrescrito a cada refresh."""

    @abstractmethod
    async def get(self, screen_id: str, data_kind: str) -> ScreenDataCacheEntry | None: ...

    @abstractmethod
    async def put(self, entry: ScreenDataCacheEntry) -> None: ...
