"""Filter que injeta contexto de rastreamento nos registros de log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CorrelationIdFilter(logging.Filter):
    """Adiciona `correlation_id` e `service` a cada LogRecord.

    Um correlation_id passado explicitamente via `extra` tem precedência
    sobre o valor do contexto.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        explicit = getattr(record, "correlation_id", None)
        record.correlation_id = explicit or self._get_correlation_id()
        record.service = self._service_name
        return True
