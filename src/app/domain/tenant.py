"""Credencial de tenant (empresa) usada para abrir envelopes de Flow.

Invariantes:
    - chave privada e app secret existem juntas ou nenhuma delas;
    - só é candidato à resolução o tenant ativo com ambas presentes;
    - rotação substitui o registro inteiro e zera o aceite da chave pública.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class TenantCredential:
    """Credenciais de um tenant.

    Attributes:
        tenant_id: Identificador do tenant (business id)
        name: Nome de exibição
        phone_number_id: Identificador do canal atribuído pela plataforma
        access_token: Token de acesso à plataforma
        private_key_pem: Chave privada RSA (PEM)
        private_key_passphrase: Passphrase da chave privada, se cifrada
        public_key_pem: Chave pública registrada na plataforma
        app_secret: Segredo compartilhado para assinatura HMAC
        public_key_uploaded: Plataforma confirmou a chave pública
        public_key_uploaded_at: Momento da confirmação
        is_active: Tenant habilitado
    """

    tenant_id: str
    name: str = ""
    phone_number_id: str = ""
    access_token: str = ""
    private_key_pem: str | None = None
    private_key_passphrase: str | None = None
    public_key_pem: str | None = None
    app_secret: str | None = None
    public_key_uploaded: bool = False
    public_key_uploaded_at: datetime | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if not self.tenant_id or not self.tenant_id.strip():
            raise ValueError("tenant_id não pode ser vazio")
        if bool(self.private_key_pem) != bool(self.app_secret):
            raise ValueError("private_key_pem e app_secret devem ser definidos juntos")

    @property
    def has_complete_credentials(self) -> bool:
        """True quando chave privada e app secret estão presentes."""
        return bool(self.private_key_pem and self.app_secret)

    @property
    def is_resolution_candidate(self) -> bool:
        return self.is_active and self.has_complete_credentials

    def with_rotated_keys(
        self,
        *,
        private_key_pem: str,
        public_key_pem: str,
        private_key_passphrase: str | None = None,
        app_secret: str | None = None,
    ) -> TenantCredential:
        """Retorna novo registro com o par de chaves substituído.

        O par antigo é descartado e o aceite da chave pública volta a False,
        pois a nova chave ainda precisa ser registrada na plataforma.
        """
        return replace(
            self,
            private_key_pem=private_key_pem,
            private_key_passphrase=private_key_passphrase,
            public_key_pem=public_key_pem,
            app_secret=app_secret or self.app_secret,
            public_key_uploaded=False,
            public_key_uploaded_at=None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serializa para persistência."""
        return {
            "tenant_id": self.tenant_id,
            "name": self.name,
            "phone_number_id": self.phone_number_id,
            "access_token": self.access_token,
            "private_key_pem": self.private_key_pem,
            "private_key_passphrase": self.private_key_passphrase,
            "public_key_pem": self.public_key_pem,
            "app_secret": self.app_secret,
            "public_key_uploaded": self.public_key_uploaded,
            "public_key_uploaded_at": (
                self.public_key_uploaded_at.isoformat() if self.public_key_uploaded_at else None
            ),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenantCredential:
        """Deserializa de persistência.

        Raises:
            ValueError: Registro viola os invariantes de credencial.
        """
        uploaded_at = data.get("public_key_uploaded_at")
        if isinstance(uploaded_at, str):
            uploaded_at = datetime.fromisoformat(uploaded_at)
        if isinstance(uploaded_at, datetime) and uploaded_at.tzinfo is None:
            uploaded_at = uploaded_at.replace(tzinfo=UTC)
        return cls(
            tenant_id=str(data.get("tenant_id", "")),
            name=data.get("name") or "",
            phone_number_id=data.get("phone_number_id") or "",
            access_token=data.get("access_token") or "",
            private_key_pem=data.get("private_key_pem") or None,
            private_key_passphrase=data.get("private_key_passphrase") or None,
            public_key_pem=data.get("public_key_pem") or None,
            app_secret=data.get("app_secret") or None,
            public_key_uploaded=bool(data.get("public_key_uploaded", False)),
            public_key_uploaded_at=uploaded_at if isinstance(uploaded_at, datetime) else None,
            is_active=bool(data.get("is_active", True)),
        )
