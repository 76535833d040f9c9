# vademecum/legal/models.py
"""
Data models para o parser de legislacao do Planalto.
Dataclasses puras, sem dependencia de DB ou HTTP.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


# ── Enums ────────────────────────────────────────────────────────────────────

class ActType(str, Enum):
    """Tipo do ato normativo, derivado do titulo."""
    ORDINARY_LAW = "Lei Ordinária"
    COMPLEMENTARY_LAW = "Lei Complementar"
    DECREE_LAW = "Decreto-Lei"
    DECREE = "Decreto"
    PROVISIONAL_MEASURE = "Medida Provisória"
    CONSTITUTIONAL_AMENDMENT = "Emenda Constitucional"
    CONSTITUTION = "Constituição"
    OTHER = "Norma"


class LineKind(str, Enum):
    """Classificacao de uma linha fisica do texto normalizado."""
    HEADER = "CABECALHO"
    SUMMARY = "EMENTA"
    BOOK = "LIVRO"
    TITLE = "TITULO"
    CHAPTER = "CAPITULO"
    SECTION = "SECAO"
    SUBSECTION = "SUBSECAO"
    PREAMBLE = "PREAMBULO"
    ARTICLE = "ARTIGO"
    PARAGRAPH_SINGLE = "PARAGRAFO_UNICO"
    PARAGRAPH = "PARAGRAFO"
    ITEM = "INCISO"
    SUB_ITEM = "ALINEA"
    SIGNATURE = "ASSINATURA"
    CONTINUATION = "CONTINUACAO"


HEADING_KINDS = (
    LineKind.BOOK,
    LineKind.TITLE,
    LineKind.CHAPTER,
    LineKind.SECTION,
    LineKind.SUBSECTION,
)


class ChangeType(str, Enum):
    """Tipo de alteracao legislativa anotada no texto compilado."""
    WORDING = "Redação"
    INCLUSION = "Inclusão"
    REPEAL = "Revogação"
    VETO = "Vetado"
    ADDITION = "Acréscimo"
    RENUMBERING = "Renumeração"
    ALTERATION = "Alteração"
    SUPPRESSION = "Supressão"


class ElementType(str, Enum):
    """Menor dispositivo que contem uma anotacao."""
    ARTICLE = "artigo"
    PARAGRAPH = "parágrafo"
    ITEM = "inciso"
    SUB_ITEM = "alínea"


# ── Classificacao de linhas (transiente) ─────────────────────────────────────

@dataclass
class StructuralLine:
    """Uma linha ja classificada. Nunca persistida."""
    kind: LineKind
    text: str                           # linha original (trim)
    number: Optional[str] = None        # '7', 'IV', 'a', '2' (par.), 'único'
    suffix: Optional[str] = None        # 'A' em 'Art. 7-A'
    label: Optional[str] = None         # rotulo do cabecalho ('DAS DISPOSIÇÕES GERAIS')

    @property
    def is_heading(self) -> bool:
        return self.kind in HEADING_KINDS

    @property
    def level(self) -> Optional[int]:
        # LIVRO=0 ... SUBSEÇÃO=4
        return HEADING_KINDS.index(self.kind) if self.is_heading else None

    @property
    def article_key(self) -> Optional[str]:
        if self.kind != LineKind.ARTICLE or self.number is None:
            return None
        return composite_key(int(self.number), self.suffix)


@dataclass
class FormattedElement:
    """Elemento emitido pelo formatador linha-a-linha."""
    kind: LineKind
    content: str
    number: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"tipo": self.kind.value, "conteudo": self.content}
        if self.number is not None:
            d["numero"] = self.number
        return d


@dataclass
class FormattedStatute:
    """Resultado do formatador: elementos + texto marcado '[TIPO]: conteudo'."""
    elements: List[FormattedElement] = field(default_factory=list)

    @property
    def formatted(self) -> str:
        return "\n".join(f"[{e.kind.value}]: {e.content}" for e in self.elements)


# ── Documento ────────────────────────────────────────────────────────────────

def composite_key(number: int, suffix: Optional[str] = None) -> str:
    """'7' ou '7-A'."""
    return f"{number}-{suffix}" if suffix else f"{number}"


@dataclass
class Article:
    """Um artigo com paragrafos/incisos/alineas re-quebrados em linhas."""
    number: int
    text: str
    suffix: str = ""                    # '' ou 'A', 'B', ...
    chapter: Optional[str] = None       # ultimo CAPÍTULO antes do artigo
    section: Optional[str] = None       # ultima SEÇÃO antes do artigo

    @property
    def key(self) -> str:
        return composite_key(self.number, self.suffix)

    @property
    def elements(self) -> List[str]:
        """Caput primeiro, depois cada paragrafo/inciso/alinea."""
        return [ln for ln in self.text.split("\n") if ln.strip()]

    def to_dict(self) -> dict:
        return {
            "numero": self.number,
            "numeroCompleto": self.key,
            "texto": self.text,
            "capitulo": self.chapter,
            "secao": self.section,
        }


@dataclass
class StructuralHeadings:
    """Cabecalhos encontrados, deduplicados, cada um com ate 200 chars."""
    books: List[str] = field(default_factory=list)
    titles: List[str] = field(default_factory=list)
    chapters: List[str] = field(default_factory=list)
    sections: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "livros": self.books,
            "titulos": self.titles,
            "capitulos": self.chapters,
            "secoes": self.sections,
        }


@dataclass
class StatuteDocument:
    """Documento normativo completo."""
    title: str
    summary: str                        # ementa, ate 800 chars
    act_type: ActType
    publication_date: Optional[date]
    headings: StructuralHeadings
    articles: List[Article]
    full_text: str                      # texto normalizado

    def statistics(self) -> dict:
        return {
            "livros": len(self.headings.books),
            "titulos": len(self.headings.titles),
            "capitulos": len(self.headings.chapters),
            "secoes": len(self.headings.sections),
            "artigos": len(self.articles),
        }


# ── Alteracoes ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AmendmentAnnotation:
    """Uma anotacao de historico legislativo '(Incluído pela Lei nº ...)'."""
    table_name: str                     # documento/tabela dona da anotacao
    article_number: str                 # compositeKey do artigo
    change_type: ChangeType
    annotation_text: str                # parentetico completo, verbatim
    element_type: ElementType
    element_number: str                 # '§ 2º', 'III', 'a', '' (artigo)
    element_text: str                   # trecho limpo, ate 200 chars (+ '...')
    amending_instrument: Optional[str] = None
    change_date: Optional[date] = None
    change_year: Optional[int] = None
    source_url: Optional[str] = None

    def to_row(self) -> dict:
        """Registro para a tabela historico_alteracoes."""
        return {
            "tabela_lei": self.table_name,
            "numero_artigo": self.article_number,
            "tipo_alteracao": self.change_type.value,
            "lei_alteradora": self.amending_instrument,
            "data_alteracao": self.change_date.isoformat() if self.change_date else None,
            "ano_alteracao": self.change_year,
            "texto_completo": self.annotation_text,
            "elemento_tipo": self.element_type.value,
            "elemento_numero": self.element_number,
            "elemento_texto": self.element_text,
            "url_lei_alteradora": self.source_url,
        }


@dataclass
class AmendmentReport:
    """Resultado da extracao de alteracoes de um documento."""
    annotations: List[AmendmentAnnotation] = field(default_factory=list)
    total_articles: int = 0
    articles_with_changes: int = 0

    @property
    def change_types(self) -> List[str]:
        return _unique(a.change_type.value for a in self.annotations)

    @property
    def element_types(self) -> List[str]:
        return _unique(a.element_type.value for a in self.annotations)


def _unique(values) -> List[str]:
    seen = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen
