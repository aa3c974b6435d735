"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ExternalDataSourceError,
    FirestoreUnavailableError,
    FlowStoreError,
    InfrastructureError,
    RedisConnectionError,
)

__all__ = [
    "ExternalDataSourceError",
    "FirestoreUnavailableError",
    "FlowStoreError",
    "InfrastructureError",
    "RedisConnectionError",
]
