"""Protocolos (ABCs) de persistência e fontes externas do endpoint de Flow."""

from .flow_answer_store import FlowAnswerStoreProtocol
from .flow_session_store import FlowSessionStoreProtocol
from .screen_data_cache import ScreenDataCacheProtocol
from .screen_data_source import ScreenDataSourceProtocol
from .tenant_store import TenantStoreProtocol

__all__ = [
    "FlowAnswerStoreProtocol",
    "FlowSessionStoreProtocol",
    "ScreenDataCacheProtocol",
    "ScreenDataSourceProtocol",
    "TenantStoreProtocol",
]
