# vademecum/legal/formatter.py
"""
Formatador linha-a-linha para texto de lei ja extraido (copiado do site,
colado de PDF etc.).

Saida: um elemento por dispositivo, serializado como '[TIPO]: conteudo'.
Linhas que nao abrem dispositivo sao anexadas ao elemento anterior; linhas
entre o cabecalho e o 1o artigo formam a EMENTA.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from vademecum.legal.classifier import (
    ClassifierState,
    classify_line,
    clean_raw_text,
    normalize_ordinals,
)
from vademecum.legal.guard import DuplicateGuard
from vademecum.legal.models import (
    FormattedElement,
    FormattedStatute,
    LineKind,
    composite_key,
)

logger = logging.getLogger(__name__)


def _next_non_empty(lines: List[str], start: int) -> Optional[str]:
    for ln in lines[start:]:
        if ln.strip():
            return ln.strip()
    return None


class _FormatterRun:
    """Estado de uma execucao; descartado ao fim do documento."""

    def __init__(self):
        self.state = ClassifierState()
        self.guard = DuplicateGuard()
        self.elements: List[FormattedElement] = []
        self.previous: Optional[FormattedElement] = None
        self.summary_buffer: List[str] = []
        self.current_article = ""
        self.current_item = ""

    def emit(self, kind: LineKind, content: str, number: Optional[str] = None, track: bool = True):
        el = FormattedElement(kind=kind, content=content, number=number)
        self.elements.append(el)
        if track:
            self.previous = el

    def flush_summary(self):
        if self.summary_buffer:
            self.elements.append(FormattedElement(kind=LineKind.SUMMARY, content=" ".join(self.summary_buffer)))
            self.summary_buffer = []

    def append_continuation(self, text: str):
        if self.previous is not None:
            self.previous.content += " " + text

    def feed(self, item):
        kind = item.kind

        if kind == LineKind.HEADER:
            self.state.header_found = True
            self.emit(kind, item.text, track=False)
            return

        if item.is_heading or kind == LineKind.PREAMBLE:
            if not self.state.first_article_found:
                self.flush_summary()
            self.emit(kind, item.text, item.number, track=kind == LineKind.PREAMBLE)
            return

        if kind == LineKind.ARTICLE:
            self.flush_summary()
            self.state.first_article_found = True
            key = composite_key(int(item.number), item.suffix)
            self.current_article = key
            self.current_item = ""
            if not self.guard.admit_article(key):
                self.previous = None
                return
            self.emit(kind, item.text, key)
            return

        if kind in (LineKind.PARAGRAPH_SINGLE, LineKind.PARAGRAPH):
            self.emit(LineKind.PARAGRAPH, item.text, item.number)
            return

        if kind == LineKind.ITEM:
            self.current_item = item.number
            if not self.guard.admit_item(self.current_article, item.number):
                self.previous = None
                return
            self.emit(kind, item.text, item.number)
            return

        if kind == LineKind.SUB_ITEM:
            letter = item.number.lower()
            if not self.guard.admit_sub_item(self.current_article, self.current_item, letter):
                self.previous = None
                return
            self.emit(kind, item.text, letter)
            return

        if kind == LineKind.SIGNATURE:
            self.emit(kind, item.text, track=False)
            self.previous = None
            return

        # CONTINUACAO
        if not self.state.first_article_found and self.state.header_found:
            self.summary_buffer.append(item.text)
        else:
            self.append_continuation(item.text)


def format_statute_text(raw_text: str) -> FormattedStatute:
    """
    Formata texto bruto de lei em elementos estruturais.

    Args:
        raw_text: texto de lei (uma linha por dispositivo, idealmente)

    Returns:
        FormattedStatute com elementos na ordem do texto
    """
    text = clean_raw_text(normalize_ordinals(raw_text or ""))
    lines = text.split("\n")
    run = _FormatterRun()
    ignored = 0

    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue
        item = classify_line(line, _next_non_empty(lines, i + 1), run.state)
        if item is None:
            ignored += 1
            logger.debug("format_statute_text: ignorando linha: %s", line[:50])
            continue
        run.feed(item)

    run.flush_summary()

    logger.info(
        "format_statute_text: %d elementos, %d linhas ignoradas, %d duplicatas",
        len(run.elements), ignored, run.guard.total_dropped,
    )
    return FormattedStatute(elements=run.elements)
