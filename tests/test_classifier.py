# tests/test_classifier.py
"""
Testes para o classificador de linhas de texto legal.
"""
from __future__ import annotations

import pytest

from vademecum.legal.classifier import (
    ClassifierState,
    classify_line,
    clean_raw_text,
    is_dangling_reference,
    is_valid_roman,
    normalize_ordinals,
    roman_to_int,
    should_ignore,
)
from vademecum.legal.models import LineKind


@pytest.fixture
def after_first_article():
    return ClassifierState(header_found=True, first_article_found=True)


# ── Romanos ──────────────────────────────────────────────────────────────────

class TestRoman:
    @pytest.mark.parametrize("token", ["I", "IV", "IX", "XIV", "XL", "XCIX", "MMXXIV"])
    def test_validos(self, token):
        assert is_valid_roman(token)

    @pytest.mark.parametrize("token", ["", "IIII", "VX", "IL", "VV", "IIV"])
    def test_invalidos(self, token):
        assert not is_valid_roman(token)

    def test_roman_to_int(self):
        assert roman_to_int("XIV") == 14
        assert roman_to_int("XCIX") == 99
        assert roman_to_int("MMXXIV") == 2024


# ── Normalizacao ─────────────────────────────────────────────────────────────

class TestNormalizacao:
    def test_ordinal_o_vira_simbolo(self):
        assert normalize_ordinals("Art. 1o Esta Lei") == "Art. 1º Esta Lei"
        assert normalize_ordinals("§ 2o O prazo") == "§ 2º O prazo"

    def test_ordinal_antes_de_virgula(self):
        assert normalize_ordinals("Art. 10o, caput") == "Art. 10º, caput"

    def test_numero_comum_intacto(self):
        assert normalize_ordinals("prazo de 10 dias") == "prazo de 10 dias"

    def test_clean_raw_text(self):
        text = "a\r\nb\tc   d\n\n\n\ne"
        assert clean_raw_text(text) == "a\nb c d\n\ne"

    def test_linhas_do_portal_ignoradas(self):
        assert should_ignore("Presidência da República")
        assert should_ignore("Casa Civil")
        assert should_ignore("| --- | --- |")
        assert not should_ignore("Art. 1º Texto.")


# ── Cabecalhos ───────────────────────────────────────────────────────────────

class TestCabecalhos:
    def test_cabecalho_do_ato(self):
        item = classify_line("LEI Nº 14.382, DE 27 DE JUNHO DE 2022")
        assert item.kind == LineKind.HEADER

    def test_cabecalho_do_ato_so_uma_vez(self):
        state = ClassifierState(header_found=True)
        item = classify_line("LEI Nº 14.382, DE 27 DE JUNHO DE 2022", state=state)
        assert item.kind != LineKind.HEADER

    def test_capitulo(self):
        item = classify_line("CAPÍTULO I")
        assert item.kind == LineKind.CHAPTER
        assert item.number == "I"
        assert item.is_heading

    def test_titulo_com_rotulo(self):
        item = classify_line("TÍTULO II - DOS DIREITOS")
        assert item.kind == LineKind.TITLE
        assert item.number == "II"
        assert item.label == "DOS DIREITOS"

    def test_secao_e_subsecao(self):
        assert classify_line("Seção I").kind == LineKind.SECTION
        assert classify_line("Subseção II").kind == LineKind.SUBSECTION

    def test_nivel_do_cabecalho(self):
        assert classify_line("LIVRO I").level == 0
        assert classify_line("Subseção II").level == 4
        assert classify_line("Texto comum").level is None

    def test_titulo_de_credito_nao_e_cabecalho(self):
        assert classify_line("Título de crédito emitido").kind == LineKind.CONTINUATION

    def test_preambulo_antes_do_primeiro_artigo(self):
        line = "O PRESIDENTE DA REPÚBLICA Faço saber que o Congresso Nacional decreta:"
        assert classify_line(line).kind == LineKind.PREAMBLE


# ── Artigos ──────────────────────────────────────────────────────────────────

class TestArtigos:
    def test_artigo_simples(self):
        item = classify_line("Art. 1º Esta Lei dispõe sobre prazos.")
        assert item.kind == LineKind.ARTICLE
        assert item.number == "1"
        assert item.suffix is None
        assert item.article_key == "1"

    def test_artigo_com_sufixo(self):
        item = classify_line("Art. 7º-A Fica instituído o cadastro.")
        assert item.kind == LineKind.ARTICLE
        assert item.article_key == "7-A"

    def test_travessao_nao_e_sufixo(self):
        item = classify_line("Art. 1º - A União editará normas gerais.")
        assert item.kind == LineKind.ARTICLE
        assert item.suffix is None

    def test_artigo_curto_valido(self):
        assert classify_line("Art. 5º Revogado.").kind == LineKind.ARTICLE

    def test_art_minusculo_e_continuacao(self):
        assert classify_line("art. 5º da Lei nº 8.666").kind == LineKind.CONTINUATION

    def test_referencia_quebrada(self):
        item = classify_line("Art. 165,", next_line="da Constituição Federal, observado o prazo")
        assert item.kind == LineKind.CONTINUATION

    def test_referencia_seguida_de_dispositivo_e_artigo(self):
        item = classify_line("Art. 165,", next_line="§ 1º O prazo sera contado.")
        assert item.kind == LineKind.ARTICLE


class TestDanglingReference:
    def test_virgula_e_linha_comum(self):
        assert is_dangling_reference(",", "da Constituição Federal")

    def test_preposicao_no_fim(self):
        assert is_dangling_reference("da", "Constituição Federal")

    def test_texto_longo(self):
        assert not is_dangling_reference("Esta Lei dispõe sobre", "prazos")

    def test_sem_proxima_linha(self):
        assert not is_dangling_reference(",", None)

    def test_proxima_linha_estrutural(self):
        assert not is_dangling_reference(",", "Art. 166. Texto")
        assert not is_dangling_reference(",", "II - inciso")


# ── Dispositivos ─────────────────────────────────────────────────────────────

class TestDispositivos:
    def test_paragrafo_antes_do_primeiro_artigo_e_continuacao(self):
        assert classify_line("§ 1º Texto.").kind == LineKind.CONTINUATION

    def test_paragrafo(self, after_first_article):
        item = classify_line("§ 1º O prazo sera contado.", state=after_first_article)
        assert item.kind == LineKind.PARAGRAPH
        assert item.number == "1"

    def test_paragrafo_unico(self, after_first_article):
        item = classify_line("Parágrafo único. Aplica-se o disposto.", state=after_first_article)
        assert item.kind == LineKind.PARAGRAPH_SINGLE
        assert item.number == "único"

    def test_inciso(self, after_first_article):
        item = classify_line("IV - zelar pelo patrimônio;", state=after_first_article)
        assert item.kind == LineKind.ITEM
        assert item.number == "IV"

    def test_inciso_romano_invalido(self, after_first_article):
        assert classify_line("IIII - texto", state=after_first_article).kind == LineKind.CONTINUATION

    def test_alinea(self, after_first_article):
        item = classify_line("b) em meio digital;", state=after_first_article)
        assert item.kind == LineKind.SUB_ITEM
        assert item.number == "b"

    def test_assinatura(self, after_first_article):
        item = classify_line("Brasília, 10 de janeiro de 2024; 203º da Independência", state=after_first_article)
        assert item.kind == LineKind.SIGNATURE

    def test_linha_do_portal(self):
        assert classify_line("Presidência da República") is None

    def test_linha_vazia(self):
        assert classify_line("   ") is None
