"""Erros de resolução de tenant e verificação de assinatura.

Mensagens são seguras para resposta externa: nunca incluem chaves,
tokens, segredos ou buffers criptográficos.
"""

from __future__ import annotations


class SignatureMismatchError(Exception):
    """Assinatura ausente ou inválida sob a política `reject`."""


class StaleKeyError(Exception):
    """Nenhuma chave privada conhecida abre o envelope.

    Sinaliza à plataforma que a chave pública em cache está desatualizada
    e deve ser buscada novamente.
    """


class TenantNotFoundError(Exception):
    """Tenant explícito informado na requisição não existe ou está inativo."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(f"Unknown tenant: {tenant_id}")
        self.tenant_id = tenant_id
