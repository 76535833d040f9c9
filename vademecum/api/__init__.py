"""Handlers HTTP (Azure Functions). Importados sob demanda pelos blueprints."""

__all__ = []
