# vademecum/legal/errors.py
"""
Excecoes do pipeline de legislacao.

O nucleo de parsing nao levanta nada disto: texto malformado degrada para
texto "sujo", nunca para excecao. Estas classes cobrem as bordas
(render HTTP, configuracao, banco).
"""
from __future__ import annotations

from typing import Optional


class VademecumError(Exception):
    """Base de todos os erros do pipeline."""


class ConfigError(VademecumError):
    """Configuracao obrigatoria ausente (ex: BROWSERLESS_API_KEY)."""


class RenderError(VademecumError):
    """Falha na API de renderizacao (status nao-2xx ou erro de transporte)."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.details = (details or "")[:500]


class StorageError(VademecumError):
    """Falha ao ler/gravar no banco."""
