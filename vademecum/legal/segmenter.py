# vademecum/legal/segmenter.py
"""
Segmentador de artigos para texto legal normalizado.

1. Varre o texto INTEIRO (nao linha a linha) procurando "Art. N" que abre
   artigo de verdade; "art." minusculo e sempre referencia.
2. Fatia o texto entre inicios consecutivos; cada fatia termina antes do
   proximo cabecalho (CAPÍTULO, Seção...) ou da assinatura final.
3. Re-quebra cada fatia: as quebras do HTML viram espaco e so abrem linha
   nova os marcadores que iniciam dispositivo (§ apos pontuacao final e
   seguido de maiuscula, Parágrafo único, inciso romano, alinea).
   Mencoes como "nos termos do art. 5º, § 2º," ficam na mesma linha.
4. Deduplica artigos por compositeKey, ordena e tira incisos/alineas
   repetidos de cada artigo (guard.py).

A decisao referencia x abertura e heuristica: pontuacao irregular na fonte
ainda pode classificar errado. As regras ficam em ReflowPolicy para que
casos novos entrem como regra, sem mexer no segmentador.
"""
from __future__ import annotations

import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from vademecum.legal.classifier import (
    RE_ITEM,
    RE_PARAGRAPH,
    RE_PARAGRAPH_SINGLE,
    RE_SUB_ITEM,
    is_dangling_reference,
    is_valid_roman,
)
from vademecum.legal.guard import DuplicateGuard, dedupe_and_sort
from vademecum.legal.models import Article

logger = logging.getLogger(__name__)

# ── Regex patterns ───────────────────────────────────────────────────────────

# Somente "Art" maiusculo (sem flag IGNORECASE de proposito)
RE_ARTICLE_START = re.compile(
    r"(?<![A-Za-zÀ-ÿ])Art\.?\s*(\d+)[º°ªo]?(?:[-–]([A-Z])(?![a-zà-ÿ]))?\.?"
)

# Fallback: qualquer "Art N" maiusculo, sem exigir inicio de linha/frase
RE_ARTICLE_LOOSE = re.compile(r"Art\.?\s*(\d+)(?:[-–]([A-Z])(?![a-zà-ÿ]))?")

# Antes do "Art.": inicio do texto, quebra de linha ou pontuacao final
RE_OPENING_CONTEXT = re.compile(r"[\n.;:)][ \t]*$")

RE_CHAPTER = re.compile(r"^(?i:CAP[ÍI]TULO)\s+[IVXLCDM]+\b[^\n]*", re.MULTILINE)
RE_SECTION = re.compile(r"^(?i:SE[ÇC][ÃA]O)\s+[IVXLCDM]+\b[^\n]*", re.MULTILINE)

HEADING_REF_CHARS = 100

# Fim antecipado do ultimo trecho de um artigo: proximo cabecalho ou assinatura
RE_SPAN_END = re.compile(
    r"^(?:(?i:LIVRO|PARTE|T[ÍI]TULO|CAP[ÍI]TULO|SE[ÇC][ÃA]O|SUBSE[ÇC][ÃA]O)\s+[IVXLCDM]+\b"
    r"|Bras[íi]lia,\s*\d|Este texto n[ãa]o substitui)",
    re.MULTILINE,
)

RE_TABLE_BLOCK = re.compile(r"\[TABELA\][\s\S]*?\[/TABELA\]")
TABLE_OPEN_MARK = "[TABELA]"
TABLE_CLOSE_MARK = "[/TABELA]"


# ── Tokens ───────────────────────────────────────────────────────────────────

class TokenKind(str, Enum):
    TEXT = "text"
    PARAGRAPH_OPEN = "paragraph_open"
    PROTECTED_REF = "protected_ref"
    ITEM_OPEN = "item_open"
    SUB_ITEM_OPEN = "sub_item_open"


OPENING_KINDS = (TokenKind.PARAGRAPH_OPEN, TokenKind.ITEM_OPEN, TokenKind.SUB_ITEM_OPEN)


@dataclass
class Token:
    kind: TokenKind
    text: str


# ── Policy ───────────────────────────────────────────────────────────────────

@dataclass
class MarkerRule:
    """
    Um marcador candidato a abrir dispositivo.

    pattern: casa o marcador na posicao candidata
    opens: regex que o texto ANTERIOR deve satisfazer para abrir linha
    protectable: se True, as protect_rules da policy podem marcar o
        candidato como referencia protegida
    validate: checagem extra sobre o match (ex: romano valido)
    """
    name: str
    kind: TokenKind
    pattern: re.Pattern
    opens: re.Pattern
    protectable: bool = False
    validate: Optional[Callable[[re.Match], bool]] = None


# Pontuacao final; ")" fecha anotacao "(Incluído pela Lei ...)" no fim do dispositivo
_TERMINAL_ANY_SPACE = re.compile(r"[.;:)]\s*$")
_TERMINAL_WITH_SPACE = re.compile(r"[.;:)]\s+$")

DEFAULT_PROTECT_RULES = [
    # ", § 2º"
    re.compile(r",\s*$"),
    # "do § 2º", "no § 1º", "ao § 3º", "pelo § 4º"
    re.compile(r"(?<![\w])(?:d[oae]s?|n[oae]s?|a[os]?|pel[oa]s?)\s+$", re.IGNORECASE),
    # "art. 165, § 2º"
    re.compile(r"(?<![\w])art\.?\s*\d+[º°]?(?:-[A-Z])?,?\s*$", re.IGNORECASE),
]

# Marcador § qualquer (abertura so se seguido de texto com maiuscula)
RE_PARAGRAPH_MARK = re.compile(r"§\s*\d+[º°o]?")
RE_PARAGRAPH_OPENING = re.compile(r"§\s*\d+[º°o]?\.?\s+[A-ZÁÉÍÓÚÂÊÔÃÕÇ]")

DEFAULT_MARKER_RULES = [
    MarkerRule(
        name="paragrafo",
        kind=TokenKind.PARAGRAPH_OPEN,
        pattern=RE_PARAGRAPH_MARK,
        opens=_TERMINAL_ANY_SPACE,
        protectable=True,
        validate=lambda m: RE_PARAGRAPH_OPENING.match(m.string, m.start()) is not None,
    ),
    MarkerRule(
        name="paragrafo_unico",
        kind=TokenKind.PARAGRAPH_OPEN,
        pattern=re.compile(r"Par[áa]grafo\s+[úu]nico"),
        opens=_TERMINAL_WITH_SPACE,
    ),
    MarkerRule(
        name="inciso",
        kind=TokenKind.ITEM_OPEN,
        pattern=re.compile(r"(?<![\w])([IVXLCDM]+)\s*[-–—]"),
        opens=_TERMINAL_WITH_SPACE,
        validate=lambda m: is_valid_roman(m.group(1)),
    ),
    MarkerRule(
        name="alinea",
        kind=TokenKind.SUB_ITEM_OPEN,
        pattern=re.compile(r"(?<![\w])[a-z]\)\s"),
        opens=_TERMINAL_WITH_SPACE,
    ),
]

# Opcional: ultimo inciso ligado por conjuncao ("II - zelar; e III - servir.")
# O "e"/"ou" fica no fim da linha anterior.
ITEM_AFTER_CONJUNCTION = MarkerRule(
    name="inciso_apos_conjuncao",
    kind=TokenKind.ITEM_OPEN,
    pattern=re.compile(r"(?<![\w])([IVXLCDM]+)\s*[-–—]"),
    opens=re.compile(r";\s+(?:e|ou)\s+$"),
    validate=lambda m: is_valid_roman(m.group(1)),
)


@dataclass
class ReflowPolicy:
    """Regras de re-quebra. Casos novos entram como regra nova."""
    protect_rules: List[re.Pattern] = field(default_factory=lambda: list(DEFAULT_PROTECT_RULES))
    marker_rules: List[MarkerRule] = field(default_factory=lambda: list(DEFAULT_MARKER_RULES))
    lookbehind_chars: int = 60

    def is_protected(self, before: str) -> bool:
        return any(p.search(before) for p in self.protect_rules)


DEFAULT_POLICY = ReflowPolicy()


# ── Article start scan ───────────────────────────────────────────────────────

@dataclass
class ArticleStart:
    offset: int
    number: int
    suffix: str = ""

    @property
    def key(self) -> str:
        return f"{self.number}-{self.suffix}" if self.suffix else f"{self.number}"


def _line_bounds(text: str, pos: int) -> Tuple[str, Optional[str]]:
    """(resto da linha a partir de pos, proxima linha nao vazia)."""
    eol = text.find("\n", pos)
    if eol < 0:
        return text[pos:], None
    rest = text[pos:eol]
    for nxt in text[eol + 1:].split("\n", 3)[:3]:
        if nxt.strip():
            return rest, nxt.strip()
    return rest, None


def find_article_starts(text: str) -> List[ArticleStart]:
    """
    Posicoes onde comecam artigos de verdade.

    Descarta: "art." minusculo (nao casa), "Art. N" no meio de frase
    ("conforme o Art. 5º desta Lei") e "Art. 165," curto seguido de linha
    comum (referencia quebrada pelo HTML).
    """
    if not text:
        return []

    starts: List[ArticleStart] = []
    rejected = 0
    for m in RE_ARTICLE_START.finditer(text):
        before = text[max(0, m.start() - 80):m.start()]
        if m.start() > 0 and not RE_OPENING_CONTEXT.search(before):
            rejected += 1
            continue
        tail, next_line = _line_bounds(text, m.end())
        if is_dangling_reference(tail, next_line):
            rejected += 1
            continue
        starts.append(ArticleStart(offset=m.start(), number=int(m.group(1)), suffix=m.group(2) or ""))

    if not starts:
        loose = [
            ArticleStart(offset=m.start(), number=int(m.group(1)), suffix=m.group(2) or "")
            for m in RE_ARTICLE_LOOSE.finditer(text)
        ]
        if loose:
            logger.info("find_article_starts: nenhum inicio estrito, usando %d matches soltos", len(loose))
        return loose

    logger.debug("find_article_starts: %d inicios, %d referencias descartadas", len(starts), rejected)
    return starts


# ── Reflow ───────────────────────────────────────────────────────────────────

def _candidates(text: str, policy: ReflowPolicy) -> List[Tuple[int, int, TokenKind]]:
    """(inicio, fim, tipo) de cada marcador, sem sobreposicao, em ordem."""
    found = []
    for rule in policy.marker_rules:
        for m in rule.pattern.finditer(text):
            before = text[max(0, m.start() - policy.lookbehind_chars):m.start()]
            if rule.protectable and policy.is_protected(before):
                found.append((m.start(), m.end(), TokenKind.PROTECTED_REF))
                continue
            if rule.validate is not None and not rule.validate(m):
                continue
            if not rule.opens.search(before):
                continue
            found.append((m.start(), m.end(), rule.kind))

    found.sort(key=lambda c: (c[0], -c[1]))
    result = []
    last_end = -1
    for start, end, kind in found:
        if start < last_end:
            continue
        result.append((start, end, kind))
        last_end = end
    return result


def tokenize(text: str, policy: ReflowPolicy = DEFAULT_POLICY) -> List[Token]:
    """Texto (ja sem quebras) -> tokens TEXT / *_OPEN / PROTECTED_REF."""
    tokens: List[Token] = []
    pos = 0
    for start, end, kind in _candidates(text, policy):
        if start > pos:
            tokens.append(Token(TokenKind.TEXT, text[pos:start]))
        tokens.append(Token(kind, text[start:end]))
        pos = end
    if pos < len(text):
        tokens.append(Token(TokenKind.TEXT, text[pos:]))
    return tokens


def render_tokens(tokens: List[Token]) -> str:
    parts: List[str] = []
    for tok in tokens:
        if tok.kind in OPENING_KINDS and parts:
            parts[-1] = parts[-1].rstrip()
            parts.append("\n")
        parts.append(tok.text)
    lines = "".join(parts).split("\n")
    return "\n".join(ln.strip() for ln in lines if ln.strip())


def reflow_article_text(span: str, policy: ReflowPolicy = DEFAULT_POLICY) -> str:
    """
    Re-quebra o texto de um artigo.

    >>> reflow_article_text("Art. 3º Algo aqui. § 1º Outro parágrafo aqui.")
    'Art. 3º Algo aqui.\\n§ 1º Outro parágrafo aqui.'
    """
    parts: List[str] = []
    pos = 0
    span = span or ""
    # Tabelas ficam como estao (uma linha por linha da tabela)
    for m in RE_TABLE_BLOCK.finditer(span):
        parts.append(_reflow_flat(span[pos:m.start()], policy))
        parts.append(m.group(0).strip())
        pos = m.end()
    parts.append(_reflow_flat(span[pos:], policy))
    return "\n".join(p for p in parts if p)


def _reflow_flat(text: str, policy: ReflowPolicy) -> str:
    flat = re.sub(r"\s+", " ", text).strip()
    if not flat:
        return ""
    return render_tokens(tokenize(flat, policy))


def split_elements(article_text: str) -> List[str]:
    """Caput + um elemento por paragrafo/inciso/alinea."""
    return [ln.strip() for ln in (article_text or "").split("\n") if ln.strip()]


# ── Segmentacao ──────────────────────────────────────────────────────────────

def _last_heading(pattern: re.Pattern, text: str) -> Tuple[Optional[str], int]:
    last = None
    for m in pattern.finditer(text):
        last = m
    if not last:
        return None, -1
    return last.group(0).strip()[:HEADING_REF_CHARS], last.start()


def _trim_span(span: str) -> str:
    """Corta o trecho no primeiro cabecalho/assinatura depois da 1a linha."""
    for m in RE_SPAN_END.finditer(span):
        if m.start() > 0:
            return span[:m.start()]
    return span


def dedupe_elements(article: Article, guard: DuplicateGuard) -> Article:
    """
    Remove incisos (artigo, romano) e alineas (artigo, romano, letra)
    repetidos do texto do artigo. Alineas de um inciso descartado vao junto.
    Paragrafo zera o inciso corrente; linhas de tabela passam intactas.
    """
    kept: List[str] = []
    numeral = ""
    skipping = False
    in_table = False

    for line in split_elements(article.text):
        if line == TABLE_OPEN_MARK:
            in_table = True
        if in_table:
            in_table = line != TABLE_CLOSE_MARK
            kept.append(line)
            continue

        item = RE_ITEM.match(line)
        sub = RE_SUB_ITEM.match(line)
        if item and is_valid_roman(item.group(1)):
            numeral = item.group(1)
            skipping = not guard.admit_item(article.key, numeral)
        elif sub:
            if skipping or not guard.admit_sub_item(article.key, numeral, sub.group(1)):
                continue
        elif RE_PARAGRAPH.match(line) or RE_PARAGRAPH_SINGLE.match(line):
            numeral = ""
            skipping = False
        if not skipping:
            kept.append(line)

    article.text = "\n".join(kept)
    return article


def segment_articles(
    text: str,
    policy: ReflowPolicy = DEFAULT_POLICY,
    guard: Optional[DuplicateGuard] = None,
) -> List[Article]:
    """
    Divide texto normalizado em artigos re-quebrados, unicos e ordenados.

    Args:
        text: texto normalizado (saida de html_to_text ou equivalente)
        policy: regras de re-quebra
        guard: guard do documento (um novo se None)

    Returns:
        artigos ordenados por (numero, sufixo)
    """
    starts = find_article_starts(text)
    if not starts:
        logger.info("segment_articles: nenhum artigo encontrado (%d chars)", len(text or ""))
        return []

    chapter: Optional[str] = None
    section: Optional[str] = None
    raw: List[Article] = []
    prev_offset = 0

    for i, st in enumerate(starts):
        end = starts[i + 1].offset if i + 1 < len(starts) else len(text)

        gap = text[prev_offset:st.offset]
        new_chapter, chapter_pos = _last_heading(RE_CHAPTER, gap)
        new_section, section_pos = _last_heading(RE_SECTION, gap)
        if new_chapter:
            chapter = new_chapter
            if section_pos < chapter_pos:
                section = None
        if new_section:
            section = new_section
        prev_offset = st.offset

        raw.append(Article(
            number=st.number,
            suffix=st.suffix,
            text=reflow_article_text(_trim_span(text[st.offset:end]), policy),
            chapter=chapter,
            section=section,
        ))

    guard = guard or DuplicateGuard()
    articles = [dedupe_elements(a, guard) for a in dedupe_and_sort(raw, guard)]
    logger.info(
        "segment_articles: %d matches, %d artigos unicos, descartados=%s",
        len(raw), len(articles), guard.dropped,
    )
    return articles
