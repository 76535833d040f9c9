"""
VADEMECUM - Parser de legislacao do Planalto.

IMPORTANT: Este arquivo deve ser side-effect free.
NAO importar modulos pesados aqui.
Use imports explicitos nos arquivos que precisam:
  from vademecum.legal.pipeline import parse_statute_html
  from vademecum.legal.amendments import extract_article_amendments
"""

__all__ = []
__version__ = "1.4.0"
