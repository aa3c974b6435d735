"""Fontes externas de dados de tela."""

from app.infra.screen_data.http_source import HttpScreenDataSource

__all__ = ["HttpScreenDataSource"]
