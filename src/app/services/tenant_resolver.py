"""Resolução do tenant dono de um envelope criptografado.

Com tenant explícito (header/body), a assinatura é verificada antes de
qualquer tentativa de descriptografia. Sem tenant explícito, os
candidatos são testados em camadas:

    1. ativos, com credencial completa e chave pública confirmada;
    2. ativos, com credencial completa (os ainda não testados).

Para cada candidato: carregar chave privada, abrir a chave AES e
descriptografar o payload. O primeiro sucesso vence. Como cada par de
chaves é único, dois sucessos só ocorreriam por colisão improvável; nesse
caso prevalece a ordem de iteração do store.

Sob a política `reject`, candidatos cujo segredo não confere com a
assinatura são descartados antes da descriptografia. O total de
tentativas de descriptografia por requisição é limitado por
`max_candidates`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.infra.crypto import (
    KeyUnwrapError,
    PayloadDecryptError,
    decrypt_flow_request,
    load_private_key,
)
from app.services.errors import SignatureMismatchError, StaleKeyError, TenantNotFoundError

if TYPE_CHECKING:
    from app.domain.tenant import TenantCredential
    from app.infra.crypto import DecryptedFlowRequest, EncryptedEnvelope
    from app.protocols.tenant_store import TenantStoreProtocol
    from app.services.signature_policy import SignatureVerifier

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 50

# Camadas de busca: primeiro exige chave pública confirmada, depois não
_CANDIDATE_TIERS = (True, False)


@dataclass(frozen=True, slots=True)
class ResolvedTenant:
    """Tenant identificado e o request já descriptografado com sua chave."""

    tenant: TenantCredential
    request: DecryptedFlowRequest
    attempts: int
    explicit: bool = False


class TenantKeyResolver:
    """Localiza o tenant cuja chave privada abre o envelope."""

    def __init__(
        self,
        tenant_store: TenantStoreProtocol,
        verifier: SignatureVerifier,
        *,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
    ) -> None:
        if max_candidates < 1:
            raise ValueError("max_candidates deve ser >= 1")
        self._tenant_store = tenant_store
        self._verifier = verifier
        self._max_candidates = max_candidates

    async def resolve_explicit(
        self,
        tenant_id: str,
        envelope: EncryptedEnvelope,
        *,
        raw_body: bytes,
        signature_header: str | None,
    ) -> ResolvedTenant:
        """Abre o envelope com a credencial do tenant informado.

        Raises:
            TenantNotFoundError: Tenant inexistente ou inativo.
            SignatureMismatchError: Assinatura recusada pela política.
            StaleKeyError: Tenant sem chave ou chave que não abre o envelope.
            PayloadDecryptError: Chave AES aberta, mas payload adulterado.
        """
        tenant = await self._tenant_store.get(tenant_id)
        if tenant is None or not tenant.is_active:
            raise TenantNotFoundError(tenant_id)

        self._verifier.check(
            raw_body,
            signature_header,
            tenant.app_secret,
            tenant_id=tenant.tenant_id,
        )

        if not tenant.private_key_pem:
            logger.warning(
                "tenant_private_key_missing",
                extra={"component": "tenant_resolver", "tenant_id": tenant.tenant_id},
            )
            raise StaleKeyError("No private key configured for tenant")

        try:
            request = self._open(tenant, envelope)
        except KeyUnwrapError as exc:
            logger.warning(
                "tenant_key_stale",
                extra={"component": "tenant_resolver", "tenant_id": tenant.tenant_id},
            )
            raise StaleKeyError("Public key is stale; re-register it with the platform") from exc

        return ResolvedTenant(tenant=tenant, request=request, attempts=1, explicit=True)

    async def resolve(
        self,
        envelope: EncryptedEnvelope,
        *,
        raw_body: bytes,
        signature_header: str | None,
    ) -> ResolvedTenant:
        """Testa candidatos até um abrir o envelope.

        Raises:
            SignatureMismatchError: Sob `reject`, nenhum candidato tem
                segredo compatível com a assinatura (nada é descriptografado).
            StaleKeyError: Nenhum candidato abriu o envelope.
        """
        tried: set[str] = set()
        attempts = 0
        signature_candidates = 0

        for require_uploaded in _CANDIDATE_TIERS:
            candidates = await self._tenant_store.list_candidates(
                require_public_key_uploaded=require_uploaded,
            )
            for tenant in candidates:
                if not tenant.is_resolution_candidate or tenant.tenant_id in tried:
                    continue
                tried.add(tenant.tenant_id)

                if self._verifier.rejects and not self._verifier.matches(
                    raw_body, signature_header, tenant.app_secret
                ):
                    continue
                signature_candidates += 1

                if attempts >= self._max_candidates:
                    logger.warning(
                        "tenant_resolution_cap_reached",
                        extra={
                            "component": "tenant_resolver",
                            "max_candidates": self._max_candidates,
                        },
                    )
                    raise StaleKeyError("No tenant key could decrypt the request")
                attempts += 1

                try:
                    request = self._open(tenant, envelope)
                except (KeyUnwrapError, PayloadDecryptError) as exc:
                    logger.debug(
                        "tenant_candidate_rejected",
                        extra={
                            "component": "tenant_resolver",
                            "tenant_id": tenant.tenant_id,
                            "error_type": type(exc).__name__,
                        },
                    )
                    continue

                if not self._verifier.rejects:
                    self._verifier.check(
                        raw_body,
                        signature_header,
                        tenant.app_secret,
                        tenant_id=tenant.tenant_id,
                    )

                logger.info(
                    "tenant_resolved",
                    extra={
                        "component": "tenant_resolver",
                        "tenant_id": tenant.tenant_id,
                        "attempts": attempts,
                        "public_key_uploaded": tenant.public_key_uploaded,
                    },
                )
                return ResolvedTenant(tenant=tenant, request=request, attempts=attempts)

        if self._verifier.rejects and tried and signature_candidates == 0:
            logger.warning(
                "tenant_resolution_signature_unmatched",
                extra={"component": "tenant_resolver", "candidates": len(tried)},
            )
            raise SignatureMismatchError("Signature verification failed")

        logger.warning(
            "tenant_resolution_failed",
            extra={
                "component": "tenant_resolver",
                "candidates": len(tried),
                "attempts": attempts,
            },
        )
        raise StaleKeyError("No tenant key could decrypt the request")

    @staticmethod
    def _open(tenant: TenantCredential, envelope: EncryptedEnvelope) -> DecryptedFlowRequest:
        private_key = load_private_key(
            tenant.private_key_pem or "",
            tenant.private_key_passphrase,
        )
        return decrypt_flow_request(envelope, private_key)
