"""Correlation id por requisição, propagado aos logs via ContextVar.

Uso:
    with correlation_scope(request.headers.get("x-correlation-id")):
        ...  # todo log emitido aqui carrega o mesmo correlation_id
"""

from __future__ import annotations

import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

CORRELATION_HEADER = "x-correlation-id"
MAX_CORRELATION_ID_LENGTH = 128

_ALLOWED_ID = re.compile(r"^[A-Za-z0-9._:\-]+$")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ("" se ausente)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def normalize_correlation_id(raw_value: str | None) -> str:
    """Aceita o valor recebido do cliente apenas se for curto e seguro.

    Valores ausentes, longos demais ou com caracteres fora de
    [A-Za-z0-9._:-] são substituídos por um id novo.
    """
    value = (raw_value or "").strip()
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH or not _ALLOWED_ID.match(value):
        return generate_correlation_id()
    return value


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto; retorna token para reset."""
    return _correlation_id.set(normalize_correlation_id(correlation_id))


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id anterior."""
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(raw_value: str | None = None) -> Iterator[str]:
    """Context manager que vincula um correlation_id ao bloco."""
    token = set_correlation_id(raw_value)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)
