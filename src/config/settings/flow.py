"""Settings do endpoint de dados de Flow.

Concentra as chaves de comportamento do protocolo: versão, telas
padrão, política de assinatura, aceite de requests em texto puro,
limite da resolução de tenant e fontes externas de dados de tela.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Literal

from config.settings.base.core import _parse_environment

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

logger = logging.getLogger(__name__)

SignaturePolicyName = Literal["reject", "permissive"]

MIN_ADMIN_TOKEN_LENGTH = 32


@dataclass(frozen=True)
class FlowEndpointSettings:
    """Configurações do protocolo de Flow.

    Attributes:
        protocol_version: Versão devolvida em toda resposta de tela
        first_screen: Tela retornada no INIT
        completion_screen: Tela retornada ao concluir o flow
        signature_policy: "reject" recusa requests sem assinatura válida;
            "permissive" registra warning e segue
        allow_plaintext_requests: Aceita requests de teste sem criptografia
        resolution_max_candidates: Máximo de tenants testados por request
        screen_data_timeout_seconds: Timeout da fonte externa de dados de tela
        screen_data_sources: screen_id -> {endpoint, method, headers, body}
        admin_token: Token das rotas administrativas; vazio desativa as rotas
    """

    protocol_version: str = "7.2"
    first_screen: str = "FORM"
    completion_screen: str = "SUCCESS"
    signature_policy: SignaturePolicyName = "reject"
    allow_plaintext_requests: bool = True
    resolution_max_candidates: int = 50
    screen_data_timeout_seconds: float = 5.0
    screen_data_sources: dict[str, dict[str, Any]] = field(default_factory=dict)
    admin_token: str = ""

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do endpoint.

        Args:
            base: BaseSettings para regras dependentes de ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.protocol_version:
            errors.append("FLOW_PROTOCOL_VERSION não pode ser vazio")

        if not self.first_screen or not self.completion_screen:
            errors.append("FLOW_FIRST_SCREEN e FLOW_COMPLETION_SCREEN são obrigatórios")

        if self.signature_policy not in ("reject", "permissive"):
            errors.append(f"FLOW_SIGNATURE_POLICY inválido: {self.signature_policy}")

        if self.resolution_max_candidates < 1:
            errors.append("FLOW_RESOLUTION_MAX_CANDIDATES deve ser >= 1")

        if self.screen_data_timeout_seconds <= 0:
            errors.append("FLOW_SCREEN_DATA_TIMEOUT_SECONDS deve ser > 0")

        for screen_id, source in self.screen_data_sources.items():
            if not isinstance(source, dict) or not source.get("endpoint"):
                errors.append(f"FLOW_SCREEN_DATA_SOURCES[{screen_id}] sem endpoint")

        if base.is_production:
            if self.signature_policy == "permissive":
                errors.append("FLOW_SIGNATURE_POLICY=permissive proibido em production")
            if self.allow_plaintext_requests:
                errors.append("FLOW_ALLOW_PLAINTEXT_REQUESTS proibido em production")
            if self.admin_token and len(self.admin_token) < MIN_ADMIN_TOKEN_LENGTH:
                errors.append(
                    f"FLOW_ADMIN_TOKEN deve ter ao menos {MIN_ADMIN_TOKEN_LENGTH} caracteres em production"
                )

        return errors


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_screen_data_sources(raw: str) -> dict[str, dict[str, Any]]:
    """Lê FLOW_SCREEN_DATA_SOURCES (objeto JSON screen_id -> config)."""
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(
            "screen_data_sources_invalid_json",
            extra={"component": "settings"},
        )
        return {}
    if not isinstance(parsed, dict):
        return {}
    return {str(key): value for key, value in parsed.items() if isinstance(value, dict)}


def _load_flow_endpoint_from_env() -> FlowEndpointSettings:
    """Carrega FlowEndpointSettings de variáveis de ambiente."""
    environment = _parse_environment(os.getenv("ENVIRONMENT", "development"))
    plaintext_default = "false" if environment == "production" else "true"
    policy_str = os.getenv("FLOW_SIGNATURE_POLICY", "reject").lower()
    policy: SignaturePolicyName = "permissive" if policy_str == "permissive" else "reject"
    return FlowEndpointSettings(
        protocol_version=os.getenv("FLOW_PROTOCOL_VERSION", "7.2"),
        first_screen=os.getenv("FLOW_FIRST_SCREEN", "FORM"),
        completion_screen=os.getenv("FLOW_COMPLETION_SCREEN", "SUCCESS"),
        signature_policy=policy,
        allow_plaintext_requests=_parse_bool(
            os.getenv("FLOW_ALLOW_PLAINTEXT_REQUESTS", plaintext_default)
        ),
        resolution_max_candidates=int(os.getenv("FLOW_RESOLUTION_MAX_CANDIDATES", "50")),
        screen_data_timeout_seconds=float(
            os.getenv("FLOW_SCREEN_DATA_TIMEOUT_SECONDS", "5.0")
        ),
        screen_data_sources=_parse_screen_data_sources(
            os.getenv("FLOW_SCREEN_DATA_SOURCES", "")
        ),
        admin_token=os.getenv("FLOW_ADMIN_TOKEN", ""),
    )


@lru_cache(maxsize=1)
def get_flow_endpoint_settings() -> FlowEndpointSettings:
    """Retorna instância cacheada de FlowEndpointSettings."""
    return _load_flow_endpoint_from_env()
