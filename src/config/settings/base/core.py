"""Settings base do flow_data_endpoint.

Ambiente, identificação nos logs e endereços dos backends compartilhados
(Redis para sessões, projeto GCP para Firestore).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Ambientes em que settings inválidas impedem o boot
STRICT_ENVIRONMENTS: frozenset[str] = frozenset({"staging", "production"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do serviço.

    Attributes:
        environment: development | staging | production
        service_name: Valor de `service_name` nos logs
        log_level: Nível do root logger
        gcp_project: Projeto GCP dos stores Firestore
        redis_url: Redis das sessões de flow
    """

    environment: Environment = "development"
    service_name: str = "flow_data_endpoint"
    log_level: str = "INFO"
    gcp_project: str = ""
    redis_url: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Stores em memória e requests em texto puro só valem aqui."""
        return self.environment == "development"

    @property
    def strict_validation(self) -> bool:
        return self.environment in STRICT_ENVIRONMENTS

    def validate(self) -> list[str]:
        """Retorna erros de ENVIRONMENT, SERVICE_NAME e LOG_LEVEL."""
        errors: list[str] = []

        if self.environment not in {"development", "staging", "production"}:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Aceita aliases curtos (prod, stage); o resto vira development."""
    aliases: dict[str, Environment] = {
        "production": "production",
        "prod": "production",
        "staging": "staging",
        "stage": "staging",
    }
    return aliases.get(env_str.strip().lower(), "development")


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "flow_data_endpoint"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        gcp_project=os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", "")),
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
