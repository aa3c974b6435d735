"""Assinatura HMAC-SHA256 do corpo bruto (X-Hub-Signature-256)."""

from __future__ import annotations

import hashlib
import hmac

from .constants import SIGNATURE_PREFIX


def compute_signature(raw_body: bytes, secret: bytes | str) -> str:
    """Retorna o valor de header `sha256=<hex>` para o corpo informado."""
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    digest = hmac.new(key, raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(raw_body: bytes, signature_header: str | None, secret: bytes | str) -> bool:
    """Valida o header contra o HMAC dos bytes exatos recebidos.

    Args:
        raw_body: Corpo da requisição como chegou (nunca re-serializado).
        signature_header: Valor de X-Hub-Signature-256.
        secret: App secret do tenant.

    Returns:
        True se a assinatura confere (comparação em tempo constante).
    """
    if not signature_header or not secret:
        return False
    header = signature_header.strip()
    if not header.startswith(SIGNATURE_PREFIX):
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(
        expected.lower().encode("ascii"),
        header.lower().encode("utf-8", "replace"),
    )
