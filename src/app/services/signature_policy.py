"""Política única de verificação de assinatura (X-Hub-Signature-256).

- REJECT (padrão): tenant sem app secret ou assinatura inválida
  interrompe a requisição com SignatureMismatchError.
- PERMISSIVE: mesmas situações geram warning e o processamento segue.
  Destinada a ambientes sem segredo configurado; proibida em produção.

A política é lida uma vez no bootstrap e injetada no verificador.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from app.infra.crypto import verify_signature
from app.services.errors import SignatureMismatchError

logger = logging.getLogger(__name__)


class SignaturePolicy(StrEnum):
    """Comportamento diante de assinatura ausente ou inválida."""

    REJECT = "reject"
    PERMISSIVE = "permissive"


class SignatureVerifier:
    """Aplica a política de assinatura sobre o corpo bruto da requisição."""

    __slots__ = ("_policy",)

    def __init__(self, policy: SignaturePolicy = SignaturePolicy.REJECT) -> None:
        self._policy = SignaturePolicy(policy)

    @property
    def policy(self) -> SignaturePolicy:
        return self._policy

    @property
    def rejects(self) -> bool:
        return self._policy is SignaturePolicy.REJECT

    def matches(self, raw_body: bytes, signature_header: str | None, secret: str | None) -> bool:
        """Comparação pura, sem aplicar a política."""
        if not secret:
            return False
        return verify_signature(raw_body, signature_header, secret)

    def check(
        self,
        raw_body: bytes,
        signature_header: str | None,
        secret: str | None,
        *,
        tenant_id: str,
    ) -> bool:
        """Verifica a assinatura conforme a política.

        Returns:
            True se a assinatura confere; False se a verificação falhou
            ou foi ignorada sob a política permissiva.

        Raises:
            SignatureMismatchError: Sob REJECT, quando não há segredo ou
                a assinatura não confere.
        """
        if not secret:
            if self.rejects:
                logger.warning(
                    "flow_signature_secret_missing",
                    extra={"component": "signature_verifier", "tenant_id": tenant_id},
                )
                raise SignatureMismatchError("No shared secret configured for tenant")
            logger.warning(
                "flow_signature_check_skipped",
                extra={"component": "signature_verifier", "tenant_id": tenant_id},
            )
            return False

        if verify_signature(raw_body, signature_header, secret):
            return True

        if self.rejects:
            logger.warning(
                "flow_signature_invalid",
                extra={"component": "signature_verifier", "tenant_id": tenant_id},
            )
            raise SignatureMismatchError("Signature verification failed")

        logger.warning(
            "flow_signature_mismatch_ignored",
            extra={"component": "signature_verifier", "tenant_id": tenant_id},
        )
        return False
