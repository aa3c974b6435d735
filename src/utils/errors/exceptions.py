"""Exceções de infraestrutura compartilhadas pelos stores de flow."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura (Redis, Firestore, etc.)."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class FlowStoreError(InfrastructureError):
    """Falha ao ler ou gravar estado persistente de flow.

    Cobre violações de contrato do store (ex: documento corrompido,
    conflito persistente em atualização atômica).
    """


class ExternalDataSourceError(InfrastructureError):
    """Fonte externa de dados de tela indisponível ou com resposta inválida.

    Recuperada localmente (cache ou lista vazia); nunca chega ao cliente.
    """
