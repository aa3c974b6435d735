"""Serviços de aplicação do endpoint de Flow.

Orquestração sobre os protocolos de store e o codec de transporte.
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.errors import SignatureMismatchError, StaleKeyError, TenantNotFoundError
from app.services.key_rotation import rotate_tenant_keys
from app.services.screen_data_provider import (
    ScreenDataProvider,
    build_source_configs,
    default_transform,
)
from app.services.signature_policy import SignaturePolicy, SignatureVerifier
from app.services.tenant_resolver import ResolvedTenant, TenantKeyResolver

__all__ = [
    "ResolvedTenant",
    "ScreenDataProvider",
    "SignatureMismatchError",
    "SignaturePolicy",
    "SignatureVerifier",
    "StaleKeyError",
    "TenantKeyResolver",
    "TenantNotFoundError",
    "build_source_configs",
    "default_transform",
    "rotate_tenant_keys",
]
