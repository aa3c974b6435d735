"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.session import (
    FlowSessionSettings,
    FlowSessionStoreBackend,
    get_flow_session_settings,
)
from config.settings.base.stores import (
    DocumentStoreBackend,
    FlowStoreSettings,
    get_flow_store_settings,
)

__all__ = [
    "BaseSettings",
    "DocumentStoreBackend",
    "Environment",
    "FlowSessionSettings",
    "FlowSessionStoreBackend",
    "FlowStoreSettings",
    "get_base_settings",
    "get_flow_session_settings",
    "get_flow_store_settings",
]
