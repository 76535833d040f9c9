# vademecum/legal/classifier.py
"""
Classificador de linhas de texto legal.

Recebe UMA linha (ja aparada) + a proxima linha (lookahead) e devolve o
tipo estrutural: cabecalho do ato, LIVRO/TÍTULO/CAPÍTULO/Seção/Subseção,
preambulo, Art., paragrafo, inciso, alinea, assinatura ou continuacao.

Ordem de teste (primeiro que casar vence):
  1. linhas do site a ignorar          -> None
  2. cabecalho do ato (so o primeiro)
  3. cabecalhos estruturais
  4. preambulo (so antes do 1o artigo)
  5. Art. N  (com 2 regras anti-falso-positivo)
  6. Parágrafo único / § N  (so apos 1o artigo)
  7. inciso romano validado (so apos 1o artigo)
  8. alinea 'a)' (so apos 1o artigo)
  9. assinatura / notas finais
 10. continuacao da linha anterior

Funcao pura: o estado (cabecalho ja visto, 1o artigo ja visto) e passado
pelo chamador em ClassifierState e atualizado por ele.
"""
from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from typing import Optional

from vademecum.legal.models import LineKind, StructuralLine

logger = logging.getLogger(__name__)

# ── Regex patterns ───────────────────────────────────────────────────────────

# Linhas do cabecalho do site (nao fazem parte da lei)
IGNORE_PATTERNS = [
    re.compile(r"^Presid[êe]ncia da Rep[úu]blica$", re.IGNORECASE),
    re.compile(r"^Casa Civil$", re.IGNORECASE),
    re.compile(r"^Subchefia para Assuntos Jur[íi]dicos$", re.IGNORECASE),
    re.compile(r"^Secretaria-Geral$", re.IGNORECASE),
    re.compile(r"^Mensagem de veto$", re.IGNORECASE),
    re.compile(r"^Vig[êe]ncia$", re.IGNORECASE),
    re.compile(r"^Regulamento$", re.IGNORECASE),
    re.compile(r"^Texto compilado$", re.IGNORECASE),
    re.compile(r"^\|(?:\s*:?-{3,}:?\s*\|)+$"),     # separador de tabela markdown
    re.compile(r"^-{3,}$"),
    re.compile(r"^L\d+$"),                          # codigos como L11959
]

# LEI Nº 14.382, DE 27 DE JUNHO DE 2022
RE_ACT_HEADER = re.compile(
    r"^(LEI(?:\s+COMPLEMENTAR)?|DECRETO(?:-LEI)?|MEDIDA\s+PROVIS[ÓO]RIA|EMENDA\s+CONSTITUCIONAL"
    r"|RESOLU[ÇC][ÃA]O|PORTARIA)"
    r"\s*(?:N[ºo°]?\.?\s*)?[\d.,]+(?:-[A-Z])?\s*,?\s*"
    r"DE\s+\d+[ºo°]?\s+DE\s+\w+\s+DE\s+\d{4}\.?$",
    re.IGNORECASE,
)

_ROMAN_OR_NUM = r"([IVXLCDM]+|\d+)"
_HEADING_TAIL = r"(?![\w])(?:\s*[-–—]\s*|\s+)?(.*)$"

# Mais especificos primeiro; numeral sempre maiusculo (evita "Título de crédito")
HEADING_PATTERNS = [
    (LineKind.BOOK, re.compile(r"^(?i:LIVRO)\s+" + _ROMAN_OR_NUM + _HEADING_TAIL)),
    (LineKind.TITLE, re.compile(r"^(?i:T[ÍI]TULO)\s+" + _ROMAN_OR_NUM + _HEADING_TAIL)),
    (LineKind.CHAPTER, re.compile(r"^(?i:CAP[ÍI]TULO)\s+" + _ROMAN_OR_NUM + _HEADING_TAIL)),
    (LineKind.SECTION, re.compile(r"^(?i:SE[ÇC][ÃA]O)\s+" + _ROMAN_OR_NUM + _HEADING_TAIL)),
    (LineKind.SUBSECTION, re.compile(r"^(?i:SUBSE[ÇC][ÃA]O)\s+" + _ROMAN_OR_NUM + _HEADING_TAIL)),
]

RE_PREAMBLE = re.compile(
    r"^(O\s+PRESIDENTE\s+DA\s+REP[ÚU]BLICA|O\s+CONGRESSO\s+NACIONAL|O\s+VICE-PRESIDENTE"
    r"|AS\s+MESAS\s+DA\s+C[ÂA]MARA|Fa[çc]o\s+saber)",
    re.IGNORECASE,
)

# Art. 1º, Art 1o, Art. 10., Art. 7º-A, Art. 7-A  (prefixo testado em qualquer caixa,
# a regra de caixa e aplicada depois para separar artigo de referencia)
# Sufixo: hifen colado + letra maiuscula isolada ("Art. 1º - A União" NAO e sufixo)
RE_ARTICLE = re.compile(
    r"^(?i:art)\.?\s*(\d+)[º°ªo]?(?:[-–]([A-Z])(?![a-zà-ÿ]))?\.?\s*"
)

RE_PARAGRAPH_SINGLE = re.compile(r"^Par[áa]grafo\s+[úu]nico\.?\s*", re.IGNORECASE)
RE_PARAGRAPH = re.compile(r"^§\s*(\d+)[º°o]?\.?\s*")

# Inciso: token romano seguido de hifen/travessao
RE_ITEM = re.compile(r"^([IVXLCDM]+)\s*[-–—]\s*")
RE_ROMAN = re.compile(r"^M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})$")

RE_SUB_ITEM = re.compile(r"^([a-z])\)\s*")

RE_SIGNATURE = re.compile(
    r"^(Bras[íi]lia|Este texto n[ãa]o substitui|Publicad[oa]|DOU de|Em exerc[íi]cio|\*)",
    re.IGNORECASE,
)

# Texto apos "Art. N" curto e terminando em virgula/preposicao -> referencia quebrada
RE_DANGLING_TAIL = re.compile(r"(?:,|\b(?:da|do|das|dos|de|na|no|nas|nos|em|ao|à))$", re.IGNORECASE)
SHORT_TAIL_CHARS = 10


@dataclass
class ClassifierState:
    """Estado por invocacao; descartado ao fim de cada documento."""
    header_found: bool = False
    first_article_found: bool = False


# ── Helpers ──────────────────────────────────────────────────────────────────

def is_valid_roman(token: str) -> bool:
    """Gramatica romana estrita (rejeita 'IIII', 'VX', 'IL', '')."""
    return bool(token) and RE_ROMAN.match(token) is not None


_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}


def roman_to_int(token: str) -> int:
    total = 0
    prev = 0
    for ch in reversed(token.upper()):
        val = _ROMAN_VALUES[ch]
        if val < prev:
            total -= val
        else:
            total += val
            prev = val
    return total


def normalize_ordinals(text: str) -> str:
    """'1o' -> '1º', 'Art. 1o' -> 'Art. 1º' (preserva a caixa de 'art')."""
    if not text:
        return ""
    text = re.sub(r"(\d+)[oO](?=\s|\.|,|\)|$)", r"\1º", text, flags=re.MULTILINE)
    text = re.sub(r"§\s*(\d+)o", r"§ \1º", text)
    text = re.sub(r"\b([Aa][Rr][Tt])\.?\s*(\d+)o\b", r"\1. \2º", text)
    return text


def clean_raw_text(text: str) -> str:
    """CRLF -> LF, tabs e espacos multiplos colapsados, no maximo 1 linha vazia."""
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " ")
    text = re.sub(r" {2,}", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text


def should_ignore(line: str) -> bool:
    return any(p.match(line) for p in IGNORE_PATTERNS)


def match_heading(line: str) -> Optional[StructuralLine]:
    for kind, pattern in HEADING_PATTERNS:
        m = pattern.match(line)
        if m:
            return StructuralLine(kind=kind, text=line, number=m.group(1), label=m.group(2).strip() or None)
    return None


def is_structural_marker(line: str) -> bool:
    """Linha que abre novo artigo/paragrafo/inciso/cabecalho."""
    if not line:
        return False
    if RE_ARTICLE.match(line) and line[0] == "A":
        return True
    if RE_PARAGRAPH.match(line) or RE_PARAGRAPH_SINGLE.match(line):
        return True
    m = RE_ITEM.match(line)
    if m and is_valid_roman(m.group(1)):
        return True
    return match_heading(line) is not None


def is_dangling_reference(tail: str, next_line: Optional[str]) -> bool:
    """
    'Art. 165,' seguido de linha comum: referencia quebrada pelo HTML,
    nao um artigo novo.
    """
    tail = tail.strip()
    if len(tail) >= SHORT_TAIL_CHARS:
        return False
    if tail and not RE_DANGLING_TAIL.search(tail):
        return False
    nxt = (next_line or "").strip()
    if not nxt or nxt.startswith("§"):
        return False
    return not is_structural_marker(nxt)


# ── Classificacao ────────────────────────────────────────────────────────────

def classify_line(
    line: str,
    next_line: Optional[str] = None,
    state: Optional[ClassifierState] = None,
) -> Optional[StructuralLine]:
    """
    Classifica uma linha.

    Args:
        line: linha aparada
        next_line: proxima linha nao vazia (lookahead), se houver
        state: estado do documento (nao e modificado aqui)

    Returns:
        StructuralLine, ou None se a linha deve ser ignorada
    """
    state = state or ClassifierState()
    line = (line or "").strip()
    if not line or should_ignore(line):
        return None

    if not state.header_found and RE_ACT_HEADER.match(line):
        return StructuralLine(kind=LineKind.HEADER, text=line)

    heading = match_heading(line)
    if heading:
        return heading

    if not state.first_article_found and RE_PREAMBLE.match(line):
        return StructuralLine(kind=LineKind.PREAMBLE, text=line)

    m = RE_ARTICLE.match(line)
    if m:
        # "art." minusculo e sempre referencia no meio do texto
        if line[0] != "A":
            return StructuralLine(kind=LineKind.CONTINUATION, text=line)
        if is_dangling_reference(line[m.end():], next_line):
            logger.debug("classify_line: referencia quebrada tratada como continuacao: %s", line[:60])
            return StructuralLine(kind=LineKind.CONTINUATION, text=line)
        return StructuralLine(kind=LineKind.ARTICLE, text=line, number=m.group(1), suffix=m.group(2))

    if state.first_article_found:
        if RE_PARAGRAPH_SINGLE.match(line):
            return StructuralLine(kind=LineKind.PARAGRAPH_SINGLE, text=line, number="único")

        m = RE_PARAGRAPH.match(line)
        if m:
            return StructuralLine(kind=LineKind.PARAGRAPH, text=line, number=m.group(1))

        m = RE_ITEM.match(line)
        if m:
            if not is_valid_roman(m.group(1)):
                return StructuralLine(kind=LineKind.CONTINUATION, text=line)
            return StructuralLine(kind=LineKind.ITEM, text=line, number=m.group(1))

        m = RE_SUB_ITEM.match(line)
        if m:
            return StructuralLine(kind=LineKind.SUB_ITEM, text=line, number=m.group(1))

    if RE_SIGNATURE.match(line):
        return StructuralLine(kind=LineKind.SIGNATURE, text=line)

    return StructuralLine(kind=LineKind.CONTINUATION, text=line)
