# vademecum/legal/guard.py
"""
Deduplicacao e ordenacao de artigos/incisos/alineas.

Paginas do Planalto repetem conteudo (sumario ecoando numeros de artigo,
raspagem duplicada). Regra: a primeira ocorrencia vence, as seguintes sao
descartadas com log, nunca com erro.

Chaves:
  artigo  -> compositeKey ('7', '7-A')
  inciso  -> (artigo, romano)
  alinea  -> (artigo, romano, letra)

Ordem final: (numero, sufixo) com sufixo vazio primeiro: 7 < 7-A < 7-B < 8.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set, Tuple

from vademecum.legal.models import Article

logger = logging.getLogger(__name__)


class DuplicateGuard:
    """Conjuntos de chaves ja vistas. Um guard por documento."""

    def __init__(self):
        self._articles: Set[str] = set()
        self._items: Set[Tuple[str, str]] = set()
        self._sub_items: Set[Tuple[str, str, str]] = set()
        self.dropped: Dict[str, int] = {"artigos": 0, "incisos": 0, "alineas": 0}

    def admit_article(self, key: str) -> bool:
        if key in self._articles:
            self.dropped["artigos"] += 1
            logger.info("Artigo duplicado ignorado: Art. %s", key)
            return False
        self._articles.add(key)
        return True

    def admit_item(self, article_key: str, numeral: str) -> bool:
        k = (article_key, numeral)
        if k in self._items:
            self.dropped["incisos"] += 1
            logger.info("Inciso duplicado ignorado: %s do Art. %s", numeral, article_key)
            return False
        self._items.add(k)
        return True

    def admit_sub_item(self, article_key: str, numeral: str, letter: str) -> bool:
        k = (article_key, numeral, letter.lower())
        if k in self._sub_items:
            self.dropped["alineas"] += 1
            logger.info(
                "Alínea duplicada ignorada: %s) do inciso %s Art. %s",
                letter, numeral, article_key,
            )
            return False
        self._sub_items.add(k)
        return True

    @property
    def total_dropped(self) -> int:
        return sum(self.dropped.values())


def article_sort_key(article: Article) -> Tuple[int, int, str]:
    # (numero, 0 se sem sufixo, sufixo)
    return (article.number, 1 if article.suffix else 0, article.suffix or "")


def dedupe_and_sort(articles: Iterable[Article], guard: DuplicateGuard = None) -> List[Article]:
    """Remove artigos de compositeKey repetida e ordena canonicamente."""
    guard = guard or DuplicateGuard()
    unique = [a for a in articles if guard.admit_article(a.key)]
    unique.sort(key=article_sort_key)
    return unique
