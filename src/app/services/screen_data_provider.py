"""Provedor de dados de tela (listas de opções `{id, title}`).

Fluxo por tela:
    1. lê a entrada de cache;
    2. se há fonte externa registrada, busca com timeout, transforma e
       sobrescreve o cache;
    3. se a busca falha, devolve o cache ou lista vazia.

Falhas da fonte externa nunca derrubam a requisição.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.screen_data import (
    DEFAULT_DATA_KIND,
    ScreenDataCacheEntry,
    ScreenDataSourceConfig,
    ScreenOption,
)
from config.logging import log_fallback
from utils.errors import ExternalDataSourceError, InfrastructureError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from app.protocols.screen_data_cache import ScreenDataCacheProtocol
    from app.protocols.screen_data_source import ScreenDataSourceProtocol

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0

_ID_KEYS = ("id", "value")
_TITLE_KEYS = ("title", "label", "name", "text")


def _first_present(item: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def default_transform(raw: Any) -> list[dict[str, str]]:
    """Converte lista (ou `{"data": [...]}`) em opções `{id, title}`.

    id: `id` ou `value`, senão `option_{índice}`.
    title: `title`, `label`, `name` ou `text`, senão o próprio id.
    """
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        items: list[Any] = raw["data"]
    elif isinstance(raw, list):
        items = raw
    else:
        return []

    options: list[dict[str, str]] = []
    for index, item in enumerate(items):
        if isinstance(item, dict):
            raw_id = _first_present(item, _ID_KEYS)
            raw_title = _first_present(item, _TITLE_KEYS)
        elif item is None:
            continue
        else:
            raw_id = raw_title = item
        option_id = str(raw_id) if raw_id is not None else f"option_{index}"
        title = str(raw_title) if raw_title is not None else option_id
        options.append({"id": option_id, "title": title})
    return options


def build_source_configs(raw_sources: Mapping[str, Mapping[str, Any]]) -> dict[str, ScreenDataSourceConfig]:
    """Valida configs vindas de settings; entradas inválidas são ignoradas."""
    configs: dict[str, ScreenDataSourceConfig] = {}
    for screen_id, raw in raw_sources.items():
        try:
            configs[screen_id] = ScreenDataSourceConfig.model_validate(raw)
        except ValidationError:
            logger.warning(
                "screen_data_source_config_invalid",
                extra={"component": "screen_data_provider", "screen_id": screen_id},
            )
    return configs


class ScreenDataProvider:
    """Resolve dados suplementares de uma tela com cache e refresh opcional."""

    def __init__(
        self,
        cache: ScreenDataCacheProtocol,
        source: ScreenDataSourceProtocol | None = None,
        source_configs: Mapping[str, ScreenDataSourceConfig] | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._cache = cache
        self._source = source
        self._source_configs: dict[str, ScreenDataSourceConfig] = dict(source_configs or {})
        self._timeout_seconds = timeout_seconds

    def register_source(self, screen_id: str, config: ScreenDataSourceConfig) -> None:
        """Associa (ou substitui) a fonte externa de uma tela."""
        self._source_configs[screen_id] = config

    async def seed_options(
        self,
        screen_id: str,
        options: Sequence[Mapping[str, Any]],
        *,
        data_kind: str = DEFAULT_DATA_KIND,
        source_config: ScreenDataSourceConfig | None = None,
    ) -> ScreenDataCacheEntry:
        """Grava opções estáticas da tela e, opcionalmente, registra a fonte.

        Falha de store é propagada.

        Raises:
            ValidationError: Opção fora do formato `{id, title}`
            InfrastructureError: Falha ao gravar o cache
        """
        entry = ScreenDataCacheEntry(
            screen_id=screen_id,
            data_kind=data_kind,
            options=[ScreenOption.model_validate(option) for option in options],
        )
        await self._cache.put(entry)
        if source_config is not None:
            self.register_source(screen_id, source_config)

        logger.info(
            "screen_data_seeded",
            extra={
                "component": "screen_data_provider",
                "screen_id": screen_id,
                "data_kind": data_kind,
                "option_count": len(entry.options),
                "source_registered": source_config is not None,
            },
        )
        return entry

    async def get_screen_data(self, screen_id: str) -> dict[str, Any]:
        """Dados da tela no formato de resposta do Flow.

        Returns:
            `{"data_source": [...]}` quando há opções, senão `{}`.
        """
        options = await self.get_options(screen_id)
        return {DEFAULT_DATA_KIND: options} if options else {}

    async def get_options(
        self,
        screen_id: str,
        data_kind: str = DEFAULT_DATA_KIND,
    ) -> list[dict[str, str]]:
        """Opções da tela: fonte externa quando possível, senão cache."""
        cached = await self._read_cache(screen_id, data_kind)
        config = self._source_configs.get(screen_id)
        if self._source is None or config is None or config.data_kind != data_kind:
            return cached

        started_at = time.perf_counter()
        try:
            options = await self._refresh(self._source, config)
        except ExternalDataSourceError as exc:
            log_fallback(
                logger,
                "screen_data_provider",
                reason=str(exc) or type(exc).__name__,
                elapsed_ms=(time.perf_counter() - started_at) * 1000,
            )
            return cached

        await self._write_cache(screen_id, data_kind, options)
        return options

    async def _refresh(
        self,
        source: ScreenDataSourceProtocol,
        config: ScreenDataSourceConfig,
    ) -> list[dict[str, str]]:
        try:
            raw = await asyncio.wait_for(source.fetch(config), timeout=self._timeout_seconds)
        except ExternalDataSourceError:
            raise
        except TimeoutError as exc:
            raise ExternalDataSourceError("timeout") from exc
        except Exception as exc:
            raise ExternalDataSourceError(f"fetch_failed: {type(exc).__name__}") from exc

        transform = config.transform or default_transform
        try:
            transformed = transform(raw)
            return [ScreenOption.model_validate(option).model_dump() for option in transformed]
        except Exception as exc:
            raise ExternalDataSourceError("transform_failed") from exc

    async def _read_cache(self, screen_id: str, data_kind: str) -> list[dict[str, str]]:
        try:
            entry = await self._cache.get(screen_id, data_kind)
        except InfrastructureError as exc:
            logger.warning(
                "screen_data_cache_read_failed",
                extra={
                    "component": "screen_data_provider",
                    "screen_id": screen_id,
                    "error_type": type(exc).__name__,
                },
            )
            return []
        return entry.options_as_dicts() if entry else []

    async def _write_cache(
        self,
        screen_id: str,
        data_kind: str,
        options: list[dict[str, str]],
    ) -> None:
        entry = ScreenDataCacheEntry(
            screen_id=screen_id,
            data_kind=data_kind,
            options=[ScreenOption.model_validate(option) for option in options],
        )
        try:
            await self._cache.put(entry)
        except InfrastructureError as exc:
            logger.warning(
                "screen_data_cache_write_failed",
                extra={
                    "component": "screen_data_provider",
                    "screen_id": screen_id,
                    "error_type": type(exc).__name__,
                },
            )
            return
        logger.info(
            "screen_data_refreshed",
            extra={
                "component": "screen_data_provider",
                "screen_id": screen_id,
                "option_count": len(options),
            },
        )
