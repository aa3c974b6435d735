"""Rotação do par de chaves RSA de um tenant.

O registro é substituído por inteiro: o par antigo é descartado e o
aceite da chave pública volta a False até novo registro na plataforma.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.crypto import generate_key_pair
from app.services.errors import TenantNotFoundError

if TYPE_CHECKING:
    from app.domain.tenant import TenantCredential
    from app.protocols.tenant_store import TenantStoreProtocol

logger = logging.getLogger(__name__)


async def rotate_tenant_keys(
    tenant_store: TenantStoreProtocol,
    tenant_id: str,
    *,
    passphrase: str | None = None,
    app_secret: str | None = None,
) -> TenantCredential:
    """Gera novo par RSA e grava o tenant rotacionado.

    Args:
        tenant_store: Store de credenciais.
        tenant_id: Tenant a rotacionar.
        passphrase: Passphrase para cifrar a nova chave privada.
        app_secret: Novo segredo; obrigatório se o tenant ainda não tem um.

    Returns:
        Credencial gravada (com a nova chave pública a registrar).

    Raises:
        TenantNotFoundError: Tenant inexistente.
        ValueError: Tenant sem segredo e nenhum informado.
    """
    tenant = await tenant_store.get(tenant_id)
    if tenant is None:
        raise TenantNotFoundError(tenant_id)

    key_pair = generate_key_pair(passphrase)
    rotated = tenant.with_rotated_keys(
        private_key_pem=key_pair.private_key_pem,
        public_key_pem=key_pair.public_key_pem,
        private_key_passphrase=passphrase,
        app_secret=app_secret,
    )
    await tenant_store.save(rotated)

    logger.info(
        "tenant_keys_rotated",
        extra={"component": "key_rotation", "tenant_id": tenant_id},
    )
    return rotated
