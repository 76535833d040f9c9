# vademecum/legal/metadata.py
"""
Metadados do ato normativo a partir do texto normalizado.

Extrai:
  - titulo: 1a linha (entre as 30 primeiras) que comeca com LEI/DECRETO/...
  - ementa: linhas entre o titulo e o 1o artigo/preambulo/cabecalho
  - tipo_norma: derivado do titulo
  - data_publicacao: "DE 27 DE JUNHO DE 2022" no titulo
  - estrutura: LIVRO / TÍTULO / CAPÍTULO / SEÇÃO (dedup, ate 200 chars)
"""
from __future__ import annotations

import re
import logging
from datetime import date
from typing import List, Optional, Tuple

from vademecum.legal.models import ActType, StructuralHeadings

logger = logging.getLogger(__name__)

MESES = {
    "janeiro": 1, "fevereiro": 2, "março": 3, "marco": 3, "abril": 4,
    "maio": 5, "junho": 6, "julho": 7, "agosto": 8,
    "setembro": 9, "outubro": 10, "novembro": 11, "dezembro": 12,
}

TITLE_SCAN_LINES = 30
SUMMARY_MAX_CHARS = 800
SUMMARY_MIN_LINE_CHARS = 10
HEADING_MAX_CHARS = 200

# ── Regex patterns ────────────────────────────────────────────────────────────

RE_TITLE = re.compile(r"^(LEI|DECRETO|MEDIDA|EMENDA|CONSTITUI[ÇC][ÃA]O)", re.IGNORECASE)

RE_SUMMARY_STOP_ARTICLE = re.compile(r"^Art\.?\s*\d+", re.IGNORECASE)
RE_SUMMARY_STOP_BLOCK = re.compile(
    r"^(O\s+PRESIDENTE|O\s+CONGRESSO|T[ÍI]TULO\s+|CAP[ÍI]TULO\s+|LIVRO\s+|PARTE\s+)",
    re.IGNORECASE,
)
RE_DECORATIVE = re.compile(r"^[\-=_\*]+$")
RE_SUMMARY_END = re.compile(r"o\s+seguinte:?\s*$", re.IGNORECASE)

# Ordem importa: COMPLEMENTAR antes de LEI Nº, DECRETO-LEI antes de DECRETO
ACT_TYPE_PATTERNS = [
    (re.compile(r"^LEI\s+COMPLEMENTAR", re.IGNORECASE), ActType.COMPLEMENTARY_LAW),
    (re.compile(r"^LEI\s+N", re.IGNORECASE), ActType.ORDINARY_LAW),
    (re.compile(r"^DECRETO-LEI", re.IGNORECASE), ActType.DECREE_LAW),
    (re.compile(r"^DECRETO\s+N", re.IGNORECASE), ActType.DECREE),
    (re.compile(r"^MEDIDA\s+PROVIS[ÓO]RIA", re.IGNORECASE), ActType.PROVISIONAL_MEASURE),
    (re.compile(r"^EMENDA\s+CONSTITUCIONAL", re.IGNORECASE), ActType.CONSTITUTIONAL_AMENDMENT),
    (re.compile(r"^CONSTITUI[ÇC][ÃA]O", re.IGNORECASE), ActType.CONSTITUTION),
]

# "DE 27 DE JUNHO DE 2022", "DE 1º DE MAIO DE 1943"
RE_TITLE_DATE = re.compile(r"DE\s+(\d{1,2})[ºo°]?\s+DE\s+(\w+)\s+DE\s+(\d{4})", re.IGNORECASE)

HEADING_COLLECTORS = [
    ("books", re.compile(r"^LIVRO\s+[IVXLCDM]+", re.IGNORECASE)),
    ("titles", re.compile(r"^T[ÍI]TULO\s+[IVXLCDM]+", re.IGNORECASE)),
    ("chapters", re.compile(r"^CAP[ÍI]TULO\s+[IVXLCDM]+", re.IGNORECASE)),
    ("sections", re.compile(r"^SE[ÇC][ÃA]O\s+[IVXLCDM]+", re.IGNORECASE)),
]


# ── Extracao ──────────────────────────────────────────────────────────────────

def find_title(lines: List[str]) -> Tuple[str, int]:
    """
    Titulo do ato.

    Returns:
        (titulo, indice da linha) ou ("", -1) se nao encontrado
    """
    for i, line in enumerate(lines[:TITLE_SCAN_LINES]):
        if RE_TITLE.match(line):
            return line, i
    return "", -1


def extract_summary(lines: List[str], title_index: int) -> str:
    """Ementa: texto entre o titulo e o primeiro artigo (ate 800 chars)."""
    if title_index < 0:
        return ""

    parts: List[str] = []
    for line in lines[title_index + 1:]:
        if RE_SUMMARY_STOP_ARTICLE.match(line) or RE_SUMMARY_STOP_BLOCK.match(line):
            break
        if len(line) > SUMMARY_MIN_LINE_CHARS and not RE_DECORATIVE.match(line):
            parts.append(line)
        if RE_SUMMARY_END.search(line):
            break
        if len(" ".join(parts)) > SUMMARY_MAX_CHARS:
            break

    summary = re.sub(r"\s+", " ", " ".join(parts)).strip()
    return summary[:SUMMARY_MAX_CHARS]


def classify_act_type(title: str) -> ActType:
    for pattern, act_type in ACT_TYPE_PATTERNS:
        if pattern.match(title or ""):
            return act_type
    return ActType.OTHER


def parse_publication_date(title: str) -> Optional[date]:
    """Data por extenso do titulo; mes desconhecido ou data invalida -> None."""
    m = RE_TITLE_DATE.search(title or "")
    if not m:
        return None
    month = MESES.get(m.group(2).lower())
    if not month:
        logger.debug("parse_publication_date: mes desconhecido '%s'", m.group(2))
        return None
    try:
        return date(int(m.group(3)), month, int(m.group(1)))
    except ValueError:
        logger.debug("parse_publication_date: data invalida em '%s'", title)
        return None


def collect_headings(lines: List[str]) -> StructuralHeadings:
    headings = StructuralHeadings()
    for line in lines:
        for attr, pattern in HEADING_COLLECTORS:
            if pattern.match(line):
                bucket = getattr(headings, attr)
                entry = line[:HEADING_MAX_CHARS]
                if entry not in bucket:
                    bucket.append(entry)
    return headings
