# vademecum/legal/html_normalizer.py
"""
Normalizador HTML -> texto para paginas de legislacao (Planalto).

Saida: um paragrafo logico por linha, sem linhas vazias, sem espacos nas
pontas. Tabelas viram blocos '[TABELA]' ... '[/TABELA]' com linhas
'| a | b |' (markdown).

Ordem importa: tabelas sao convertidas ANTES de remover tags, senao a
estrutura de linhas/celulas se perde.

Nao levanta excecao para HTML malformado: a remocao de tags por regex
degrada para "texto com sobras", nunca para erro.
"""
from __future__ import annotations

import html as html_lib
import logging
import re

logger = logging.getLogger(__name__)

TABLE_OPEN = "[TABELA]"
TABLE_CLOSE = "[/TABELA]"

# Blocos removidos inteiros (conteudo + tag)
_RE_DROP_BLOCKS = re.compile(
    r"<(script|style|noscript|iframe)\b[^>]*>[\s\S]*?</\1\s*>",
    re.IGNORECASE,
)
_RE_COMMENT = re.compile(r"<!--[\s\S]*?-->")

_RE_TABLE = re.compile(r"<table[^>]*>([\s\S]*?)</table\s*>", re.IGNORECASE)

# <br> e variantes viram ESPACO: quebras do HTML nao indicam paragrafo
_RE_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)
_RE_BLOCK_CLOSE = re.compile(r"</(?:p|div|h[1-6]|li)\s*>", re.IGNORECASE)
# Tag so comeca com letra, '/' ou '!': "< 5 mil e > 2" decodificado nao e tag
_RE_TAG = re.compile(r"<[A-Za-z/!][^>]*>")

# Entidades minimas para texto legal; &amp; por ultimo para nao decodificar 2x
_ENTITIES = [
    (re.compile(r"&nbsp;", re.IGNORECASE), " "),
    (re.compile(r"&lt;", re.IGNORECASE), "<"),
    (re.compile(r"&gt;", re.IGNORECASE), ">"),
    (re.compile(r"&quot;", re.IGNORECASE), '"'),
    (re.compile(r"&#39;"), "'"),
    (re.compile(r"&ordm;", re.IGNORECASE), "º"),
    (re.compile(r"&ordf;", re.IGNORECASE), "ª"),
    (re.compile(r"&sect;", re.IGNORECASE), "§"),
    (re.compile(r"&#x?[0-9a-f]+;", re.IGNORECASE), ""),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
]


def _cell_text(cell) -> str:
    text = " ".join(cell.get_text().split())
    # Re-escapa para a decodificacao generica nao tratar '<x>' de celula como tag
    return html_lib.escape(text, quote=False)


def _table_to_text(table_html: str, header_first_row: bool = True) -> str:
    """Converte o conteudo de UMA <table> em bloco markdown."""
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(table_html, "html.parser")
    lines = ["", "", TABLE_OPEN]
    first = True

    for tr in soup.find_all("tr"):
        cells = [_cell_text(c) for c in tr.find_all(["th", "td"])]
        if not cells:
            continue
        lines.append("| " + " | ".join(cells) + " |")
        # Primeira linha sempre tratada como cabecalho (tabelas sem cabecalho
        # ganham separador espurio; desligue com header_first_row=False)
        if first and header_first_row:
            lines.append("|" + "|".join(" --- " for _ in cells) + "|")
        first = False

    lines.extend([TABLE_CLOSE, "", ""])
    return "\n".join(lines)


def convert_tables(html: str, header_first_row: bool = True) -> str:
    """Substitui cada <table>...</table> pelo bloco textual equivalente."""
    if not html:
        return ""
    count = 0

    def _replace(m: re.Match) -> str:
        nonlocal count
        count += 1
        return _table_to_text(m.group(1), header_first_row)

    out = _RE_TABLE.sub(_replace, html)
    if count:
        logger.debug("convert_tables: %d tabelas convertidas", count)
    return out


def decode_entities(text: str) -> str:
    for pattern, repl in _ENTITIES:
        text = pattern.sub(repl, text)
    return text


def normalize_whitespace(text: str) -> str:
    """Espacos/tabs colapsados, linhas aparadas, sem linhas vazias."""
    if not text:
        return ""
    text = text.replace("\u00a0", " ")
    text = re.sub(r"\r\n|\r", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    lines = [ln.strip() for ln in text.split("\n")]
    return "\n".join(ln for ln in lines if ln)


def html_to_text(html: str, header_first_row: bool = True) -> str:
    """
    Converte HTML renderizado em texto paragrafado.

    Args:
        html: HTML bruto (pode ter centenas de KB)
        header_first_row: trata a 1a linha de cada tabela como cabecalho

    Returns:
        texto com um paragrafo por linha ('' para entrada vazia)
    """
    if not html:
        return ""

    text = _RE_COMMENT.sub("", html)
    text = _RE_DROP_BLOCKS.sub("", text)
    text = convert_tables(text, header_first_row)

    text = _RE_BR.sub(" ", text)
    text = _RE_BLOCK_CLOSE.sub("\n", text)
    text = _RE_TAG.sub("", text)
    text = decode_entities(text)

    text = normalize_whitespace(text)
    logger.debug("html_to_text: %d chars HTML -> %d chars texto", len(html), len(text))
    return text
