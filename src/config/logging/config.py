"""Configuração centralizada de logging JSON.

Chamado uma única vez pelo bootstrap (app.bootstrap.initialize_app).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "flow_data_endpoint"

# Bibliotecas que logam URLs/headers em INFO; mantidas em WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Instala handler JSON único no root logger.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Valor do campo `service` em todo registro.
        correlation_id_getter: Função que retorna o correlation_id corrente
            (ex: app.observability.get_correlation_id).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substitui handlers existentes (evita duplicação em reload)
    root.handlers = [handler]

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo (o filter injeta service/correlation_id)."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra que um fallback foi usado no lugar do caminho principal.

    Exemplo: dados de tela servidos do cache porque a fonte externa falhou.

    Args:
        logger: Logger do módulo chamador.
        component: Componente que aplicou o fallback.
        reason: Motivo curto e sem dados sensíveis (ex: "timeout").
        elapsed_ms: Tempo gasto antes do fallback, quando medido.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = round(elapsed_ms, 2)

    logger.warning("fallback_applied", extra=extra)
