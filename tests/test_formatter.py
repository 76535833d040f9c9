# tests/test_formatter.py
"""
Testes para o formatador linha-a-linha.
"""
from __future__ import annotations

from vademecum.legal.formatter import format_statute_text
from vademecum.legal.models import LineKind

RAW = "\n".join([
    "Presidência da República",
    "LEI Nº 14.999, DE 10 DE JANEIRO DE 2024",
    "Dispõe sobre normas de teste",
    "e dá outras providências.",
    "O PRESIDENTE DA REPÚBLICA Faço saber que o Congresso Nacional decreta:",
    "CAPÍTULO I",
    "Art. 1o Esta Lei estabelece normas gerais.",
    "Art. 2º Para os fins desta Lei, considera-se:",
    "I - documento: o texto publicado;",
    "a) em meio físico;",
    "b) em meio digital;",
    "II - anotação: a nota de alteração.",
    "Parágrafo único. Aplica-se o disposto no",
    "art. 1º desta Lei.",
    "Art. 2º Para os fins desta Lei, considera-se:",
    "I - documento: o texto publicado;",
    "Brasília, 10 de janeiro de 2024.",
])


class TestFormatStatuteText:
    def setup_method(self):
        self.result = format_statute_text(RAW)
        self.kinds = [e.kind for e in self.result.elements]

    def test_sequencia_de_elementos(self):
        assert self.kinds == [
            LineKind.HEADER,
            LineKind.SUMMARY,
            LineKind.PREAMBLE,
            LineKind.CHAPTER,
            LineKind.ARTICLE,
            LineKind.ARTICLE,
            LineKind.ITEM,
            LineKind.SUB_ITEM,
            LineKind.SUB_ITEM,
            LineKind.ITEM,
            LineKind.PARAGRAPH,
            LineKind.SIGNATURE,
        ]

    def test_ementa_junta_linhas(self):
        summary = self.result.elements[1]
        assert summary.content == "Dispõe sobre normas de teste e dá outras providências."

    def test_ordinal_normalizado(self):
        article = self.result.elements[4]
        assert article.content == "Art. 1º Esta Lei estabelece normas gerais."
        assert article.number == "1"

    def test_continuacao_anexada(self):
        paragraph = self.result.elements[10]
        assert paragraph.number == "único"
        assert paragraph.content == "Parágrafo único. Aplica-se o disposto no art. 1º desta Lei."

    def test_duplicatas_descartadas(self):
        articles = [e for e in self.result.elements if e.kind == LineKind.ARTICLE]
        items = [e for e in self.result.elements if e.kind == LineKind.ITEM]
        assert [a.number for a in articles] == ["1", "2"]
        assert [i.number for i in items] == ["I", "II"]

    def test_texto_formatado(self):
        lines = self.result.formatted.split("\n")
        assert lines[0] == "[CABECALHO]: LEI Nº 14.999, DE 10 DE JANEIRO DE 2024"
        assert lines[-1] == "[ASSINATURA]: Brasília, 10 de janeiro de 2024."
        assert "[PARAGRAFO]: Parágrafo único." in self.result.formatted

    def test_to_dict(self):
        d = self.result.elements[6].to_dict()
        assert d == {"tipo": "INCISO", "conteudo": "I - documento: o texto publicado;", "numero": "I"}
        assert "numero" not in self.result.elements[0].to_dict()


class TestFormatEdgeCases:
    def test_texto_vazio(self):
        assert format_statute_text("").elements == []

    def test_sem_cabecalho_continuacao_sem_elemento_anterior(self):
        result = format_statute_text("linha solta\nArt. 1º Texto do artigo.")
        assert [e.kind for e in result.elements] == [LineKind.ARTICLE]

    def test_continuacao_de_duplicata_descartada(self):
        raw = "Art. 1º Primeiro texto.\nArt. 1º Repetido\ncontinua aqui."
        result = format_statute_text(raw)
        assert len(result.elements) == 1
        assert result.elements[0].content == "Art. 1º Primeiro texto."
