# vademecum/legal/amendments.py
"""
Extrator de anotacoes de historico legislativo.

Textos compilados do Planalto marcam cada alteracao entre parenteses:
  (Incluído pela Lei nº 14.382, de 2022)
  (Redação dada pela Lei Complementar nº 187, de 2021)
  (Revogado pela Medida Provisória nº 1.108, de 2022)

Para cada anotacao: tipo da alteracao, ato alterador, data/ano, URL
provavel do ato no Planalto e o dispositivo (artigo, paragrafo, inciso,
alinea) onde ela aparece. Parenteticos sem palavra-chave de alteracao
(ex: "(Vide Decreto nº 123)") sao ignorados.
"""
from __future__ import annotations

import re
import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

from vademecum.legal.classifier import is_valid_roman
from vademecum.legal.models import (
    AmendmentAnnotation,
    AmendmentReport,
    ChangeType,
    ElementType,
)
from vademecum.legal.segmenter import reflow_article_text, split_elements

logger = logging.getLogger(__name__)

PLANALTO_BASE = "https://www.planalto.gov.br/ccivil_03"

ELEMENT_TEXT_MAX_CHARS = 200
CONTEXT_CHARS = 100

# ── Regex patterns ────────────────────────────────────────────────────────────

_CHANGE_KEYWORDS = r"Incluíd|Incluid|Revogad|Vetad|Redação|Acrescid|Acrescentad|Alterad|Suprimid"

# Palavra-chave em qualquer posicao do parentetico
RE_ANNOTATION = re.compile(r"\(([^)]*(?:" + _CHANGE_KEYWORDS + r")[^)]*)\)", re.IGNORECASE)

# Anotacoes + remissoes removidas do texto do elemento
RE_ELEMENT_NOISE = re.compile(
    r"\([^)]*(?:" + _CHANGE_KEYWORDS + r"|Vide|Vigência|Regulamento)[^)]*\)",
    re.IGNORECASE,
)

# Prioridade fixa: primeiro que casar vence
CHANGE_TYPE_RULES = [
    (("redação", "redacao"), ChangeType.WORDING),
    (("incluíd", "incluid"), ChangeType.INCLUSION),
    (("revogad",), ChangeType.REPEAL),
    (("vetad",), ChangeType.VETO),
    (("acrescid", "acrescentad"), ChangeType.ADDITION),
    (("renumerad",), ChangeType.RENUMBERING),
    (("alterad",), ChangeType.ALTERATION),
    (("suprimid",), ChangeType.SUPPRESSION),
]

_INSTRUMENT_TAIL = r"(?:/\d{2,4})?(?:,?\s*de\s*\d{4})?"
INSTRUMENT_PATTERNS = [
    re.compile(r"((?<![-\w])Lei\s+(?:Complementar\s+)?n[ºo°]?\s*[\d.]+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
    re.compile(r"(Decreto(?:-Lei)?\s+n[ºo°]?\s*[\d.]+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
    re.compile(r"(Emenda\s+Constitucional\s+n[ºo°]?\s*\d+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
    re.compile(r"(Medida\s+Provis[óo]ria\s+n[ºo°]?\s*[\d.]+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
    re.compile(r"(LC\s+n[ºo°]?\s*[\d.]+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
    re.compile(r"(MP\s+n[ºo°]?\s*[\d.]+" + _INSTRUMENT_TAIL + ")", re.IGNORECASE),
]

RE_FULL_DATE = re.compile(r"(?<![\d.])(\d{1,2})[./](\d{1,2})[./](\d{2,4})(?!\d)")
RE_YEAR_AFTER = re.compile(r"(?:de\s+|/|,\s*)(\d{4})(?!\d)", re.IGNORECASE)
RE_ANY_YEAR = re.compile(r"(?<!\d)(\d{4})(?!\d)")
MIN_YEAR, MAX_YEAR = 1900, 2100

RE_INSTRUMENT_NUMBER = re.compile(r"n[ºo°]?\s*([\d.]+)", re.IGNORECASE)

# Marcadores no inicio de um elemento
RE_EL_PARAGRAPH_SINGLE = re.compile(r"^Par[áa]grafo\s+[úu]nico\.?\s*", re.IGNORECASE)
RE_EL_PARAGRAPH = re.compile(r"^§\s*(\d+)[ºo°]?\s*")
RE_EL_ITEM = re.compile(r"^([IVXLCDM]+)\s*[-–—.]\s*")
RE_EL_SUB_ITEM = re.compile(r"^([a-z])\)\s*", re.IGNORECASE)
RE_EL_CAPUT = re.compile(r"^Art\.?\s*\d+", re.IGNORECASE)

# Marcadores em qualquer posicao (busca para tras no fallback)
RE_INLINE_MARKERS = re.compile(
    r"(?i:par[áa]grafo\s+[úu]nico)|§\s*\d+|(?<![\w])[IVXLCDM]+\s*[-–—]|(?<![\w])[a-z]\)"
)


# ── Classificacao da anotacao ─────────────────────────────────────────────────

def find_annotations(text: str) -> List[re.Match]:
    return list(RE_ANNOTATION.finditer(text or ""))


def classify_change(annotation: str) -> Optional[ChangeType]:
    """Tipo da alteracao; None quando nenhuma palavra-chave casa."""
    low = (annotation or "").lower()
    for needles, change_type in CHANGE_TYPE_RULES:
        if any(n in low for n in needles):
            return change_type
    return None


def extract_amending_instrument(annotation: str) -> Optional[str]:
    for pattern in INSTRUMENT_PATTERNS:
        m = pattern.search(annotation or "")
        if m:
            return m.group(1).strip().rstrip(".")
    return None


def extract_change_date(annotation: str) -> Tuple[Optional[date], Optional[int]]:
    """
    Data e ano da alteracao.

    Ordem: DD.MM.AAAA / DD/MM/AAAA (ano com 2 digitos -> 2000+), depois
    "de AAAA" / ", AAAA" / "/AAAA", depois qualquer ano entre 1900 e 2100.

    Returns:
        (data ou None, ano ou None)
    """
    text = annotation or ""

    m = RE_FULL_DATE.search(text)
    if m:
        day, month, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if year < 100:
            year += 2000
        try:
            return date(year, month, day), year
        except ValueError:
            logger.debug("extract_change_date: data invalida '%s'", m.group(0))

    for pattern in (RE_YEAR_AFTER, RE_ANY_YEAR):
        for m in pattern.finditer(text):
            year = int(m.group(1))
            if MIN_YEAR <= year <= MAX_YEAR:
                return None, year

    return None, None


def build_source_url(instrument: Optional[str]) -> Optional[str]:
    """
    URL provavel do ato alterador no Planalto (melhor esforco).

    Leis ordinarias >= 10000 apontam para a pasta de atos recentes; atos
    antigos podem ter URL diferente na pratica.
    """
    if not instrument:
        return None
    m = RE_INSTRUMENT_NUMBER.search(instrument)
    if not m:
        return None
    number = m.group(1).replace(".", "")
    if not number:
        return None

    low = instrument.lower()
    if "emenda constitucional" in low:
        return f"{PLANALTO_BASE}/constituicao/emendas/emc/emc{number}.htm"
    if "lei complementar" in low or low.startswith("lc"):
        return f"{PLANALTO_BASE}/leis/lcp/lcp{number}.htm"
    if "medida provisória" in low or "medida provisoria" in low or low.startswith("mp"):
        return f"{PLANALTO_BASE}/_ato2019-2022/2022/mpv/mpv{number}.htm"
    if "decreto-lei" in low:
        return f"{PLANALTO_BASE}/decreto-lei/del{number}.htm"
    if "decreto" in low:
        return f"{PLANALTO_BASE}/decreto/d{number}.htm"
    if "lei" in low:
        if int(number) >= 10000:
            return f"{PLANALTO_BASE}/_ato2019-2022/2022/lei/l{number}.htm"
        return f"{PLANALTO_BASE}/leis/l{number}.htm"
    return None


# ── Dispositivo ───────────────────────────────────────────────────────────────

def identify_element(segment: str) -> Tuple[ElementType, str]:
    """
    Tipo e numero do dispositivo pelo marcador no inicio do trecho.

    Caput e trecho sem marcador viram (ARTICLE, '').
    """
    segment = (segment or "").strip()
    if RE_EL_PARAGRAPH_SINGLE.match(segment):
        return ElementType.PARAGRAPH, "único"
    m = RE_EL_PARAGRAPH.match(segment)
    if m:
        return ElementType.PARAGRAPH, f"§ {m.group(1)}º"
    m = RE_EL_ITEM.match(segment)
    if m and is_valid_roman(m.group(1)):
        return ElementType.ITEM, m.group(1)
    m = RE_EL_SUB_ITEM.match(segment)
    if m:
        return ElementType.SUB_ITEM, m.group(1).lower()
    return ElementType.ARTICLE, ""


def clean_element_text(text: str) -> str:
    """Remove anotacoes/remissoes, colapsa espacos, corta em 200 chars + '...'."""
    cleaned = RE_ELEMENT_NOISE.sub("", text or "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > ELEMENT_TEXT_MAX_CHARS:
        cleaned = cleaned[:ELEMENT_TEXT_MAX_CHARS] + "..."
    return cleaned


def _enclosing_element(text: str, pos: int) -> Tuple[ElementType, str, str]:
    """Marcador mais proximo antes de pos + ate 100 chars de contexto."""
    before = text[:pos]
    last = None
    for m in RE_INLINE_MARKERS.finditer(before):
        last = m
    context = before[max(0, pos - CONTEXT_CHARS):].strip()
    if last is None:
        return ElementType.ARTICLE, "", context
    el_type, el_number = identify_element(before[last.start():])
    return el_type, el_number, context


def _article_elements(article_text: str) -> List[str]:
    lines = split_elements(article_text)
    if len(lines) <= 1:
        # Texto salvo em uma linha so: re-quebra pelos marcadores
        return split_elements(reflow_article_text(article_text))
    return lines


def _build(table_name, article_number, annotation, change_type, el_type, el_number, el_text):
    instrument = extract_amending_instrument(annotation)
    change_date, change_year = extract_change_date(annotation)
    return AmendmentAnnotation(
        table_name=table_name,
        article_number=article_number,
        change_type=change_type,
        annotation_text=annotation,
        element_type=el_type,
        element_number=el_number,
        element_text=el_text,
        amending_instrument=instrument,
        change_date=change_date,
        change_year=change_year,
        source_url=build_source_url(instrument),
    )


def extract_article_amendments(
    article_text: str,
    article_number: str,
    table_name: str,
) -> List[AmendmentAnnotation]:
    """
    Anotacoes de um artigo, uma por (artigo, texto da anotacao).

    Args:
        article_text: texto final do artigo (com ou sem quebras de linha)
        article_number: compositeKey do artigo ('7', '7-A')
        table_name: documento/tabela dona do artigo

    Returns:
        lista de AmendmentAnnotation na ordem do texto
    """
    results: List[AmendmentAnnotation] = []
    seen = set()

    for element in _article_elements(article_text):
        for m in find_annotations(element):
            annotation = " ".join(m.group(0).split())
            if (article_number, annotation) in seen:
                continue
            seen.add((article_number, annotation))
            change_type = classify_change(annotation)
            if change_type is None:
                continue
            el_type, el_number = identify_element(element)
            results.append(_build(
                table_name, article_number, annotation, change_type,
                el_type, el_number, clean_element_text(element),
            ))

    if results:
        return results

    # Anotacao cortada entre elementos: varre o artigo inteiro
    for m in find_annotations(article_text):
        annotation = " ".join(m.group(0).split())
        if (article_number, annotation) in seen:
            continue
        seen.add((article_number, annotation))
        change_type = classify_change(annotation)
        if change_type is None:
            continue
        el_type, el_number, context = _enclosing_element(article_text, m.start())
        results.append(_build(
            table_name, article_number, annotation, change_type,
            el_type, el_number, clean_element_text(context or article_text[:ELEMENT_TEXT_MAX_CHARS]),
        ))
    return results


def extract_document_amendments(
    articles: Iterable[Tuple[str, str]],
    table_name: str,
) -> AmendmentReport:
    """
    Anotacoes de todos os artigos de um documento.

    Args:
        articles: pares (numero do artigo, texto); pares vazios sao pulados
        table_name: documento/tabela

    Returns:
        AmendmentReport
    """
    report = AmendmentReport()
    for number, text in articles:
        if not number or not text:
            continue
        report.total_articles += 1
        found = extract_article_amendments(text, str(number), table_name)
        if found:
            report.articles_with_changes += 1
            report.annotations.extend(found)

    logger.info(
        "extract_document_amendments: %s: %d artigos, %d com alteracao, %d anotacoes",
        table_name, report.total_articles, report.articles_with_changes, len(report.annotations),
    )
    return report
