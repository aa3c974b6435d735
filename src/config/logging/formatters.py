"""Formatter JSON com campos obrigatórios.

Campos sempre presentes: asctime, level, logger, message,
correlation_id e service. Campos de `extra` são anexados ao JSON.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def create_json_formatter() -> JsonFormatter:
    """Cria JsonFormatter com os campos obrigatórios renomeados.

    Exemplo de saída:
        {"asctime": "2026-10-19T10:30:00+0000", "level": "INFO",
         "logger": "app.services.tenant_resolver",
         "message": "tenant_resolved", "correlation_id": "abc-123",
         "service": "flow_data_endpoint", "component": "tenant_resolver"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(
        format_string,
        datefmt=ISO_DATE_FORMAT,
        rename_fields=FIELD_RENAME_MAP,
    )
