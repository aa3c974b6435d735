"""Fonte externa de dados de tela via HTTP (httpx)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.protocols.screen_data_source import ScreenDataSourceProtocol
from utils.errors import ExternalDataSourceError

if TYPE_CHECKING:
    from app.domain.screen_data import ScreenDataSourceConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class HttpScreenDataSource(ScreenDataSourceProtocol):
    """Executa a chamada descrita em ScreenDataSourceConfig.

    Args:
        timeout_seconds: Timeout total da requisição HTTP.
        client: Cliente compartilhado (opcional). Sem ele, um cliente é
            aberto e fechado a cada busca.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._client = client

    async def fetch(self, config: ScreenDataSourceConfig) -> Any:
        try:
            if self._client is not None:
                response = await self._send(self._client, config)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._send(client, config)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            logger.warning(
                "screen_data_source_timeout",
                extra={"component": "screen_data_source", "method": config.method},
            )
            raise ExternalDataSourceError("timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "screen_data_source_http_error",
                extra={
                    "component": "screen_data_source",
                    "status_code": exc.response.status_code,
                },
            )
            raise ExternalDataSourceError(f"http_{exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "screen_data_source_failed",
                extra={"component": "screen_data_source", "error_type": type(exc).__name__},
            )
            raise ExternalDataSourceError("request_failed") from exc
        except ValueError as exc:
            raise ExternalDataSourceError("invalid_json") from exc

    async def _send(
        self,
        client: httpx.AsyncClient,
        config: ScreenDataSourceConfig,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {"headers": config.headers, "timeout": self._timeout}
        if config.body is not None and config.method != "GET":
            kwargs["json"] = config.body
        return await client.request(config.method, config.endpoint, **kwargs)
