"""Agregador de settings do flow_data_endpoint.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    DocumentStoreBackend,
    Environment,
    FlowSessionSettings,
    FlowSessionStoreBackend,
    FlowStoreSettings,
    get_base_settings,
    get_flow_session_settings,
    get_flow_store_settings,
)
from config.settings.flow import (
    FlowEndpointSettings,
    SignaturePolicyName,
    get_flow_endpoint_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)

__all__ = [
    "BaseSettings",
    "DocumentStoreBackend",
    "Environment",
    "FirestoreSettings",
    "FlowEndpointSettings",
    "FlowSessionSettings",
    "FlowSessionStoreBackend",
    "FlowStoreSettings",
    "SignaturePolicyName",
    "get_base_settings",
    "get_firestore_settings",
    "get_flow_endpoint_settings",
    "get_flow_session_settings",
    "get_flow_store_settings",
]
