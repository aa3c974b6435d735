"""Modelos de dados de tela (opções de dropdown) e de sua fonte externa.

Opções seguem sempre o formato uniforme `{id, title}` esperado pelos
componentes de seleção do Flow.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DATA_KIND = "data_source"

ScreenOptionsTransform = Callable[[Any], list[dict[str, str]]]


class ScreenOption(BaseModel):
    """Opção selecionável de uma tela."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    title: str


class ScreenDataSourceConfig(BaseModel):
    """Contrato de busca na fonte externa (método, endpoint, headers, body).

    `transform` converte o JSON da fonte em lista `{id, title}`; quando
    ausente, o provider aplica as heurísticas padrão.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    endpoint: str = Field(..., min_length=1)
    method: Literal["GET", "POST", "PUT"] = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = None
    data_kind: str = DEFAULT_DATA_KIND
    transform: ScreenOptionsTransform | None = Field(default=None, exclude=True)


class ScreenDataCacheEntry(BaseModel):
    """Último resultado bem-sucedido de uma fonte, por (tela, tipo de dado)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    screen_id: str
    data_kind: str = DEFAULT_DATA_KIND
    options: list[ScreenOption] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.screen_id, self.data_kind)

    def options_as_dicts(self) -> list[dict[str, str]]:
        return [option.model_dump() for option in self.options]


def build_cache_key(screen_id: str, data_kind: str = DEFAULT_DATA_KIND) -> str:
    """Chave composta usada como id de documento/entrada de cache."""
    return f"{screen_id}__{data_kind}"
