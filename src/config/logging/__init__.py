"""Logging estruturado (JSON) do endpoint de flows.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="flow_data_endpoint")
    logger = get_logger(__name__)
    logger.info("flow_action_handled", extra={"component": "flow_fsm"})

Todo registro carrega correlation_id e service. Nunca registrar chaves,
tokens, segredos ou payloads descriptografados.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
