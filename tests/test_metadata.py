# tests/test_metadata.py
"""
Testes para titulo, ementa, tipo, data e estrutura do ato.
"""
from __future__ import annotations

from datetime import date

import pytest

from vademecum.legal.metadata import (
    classify_act_type,
    collect_headings,
    extract_summary,
    find_title,
    parse_publication_date,
)
from vademecum.legal.models import ActType

LINES = [
    "Presidência da República",
    "Casa Civil",
    "LEI Nº 14.382, DE 27 DE JUNHO DE 2022",
    "Conversão da Medida Provisória nº 1.085, de 2021",
    "Dispõe sobre o Sistema Eletrônico dos Registros Públicos.",
    "O PRESIDENTE DA REPÚBLICA Faço saber que o Congresso Nacional decreta:",
    "CAPÍTULO I",
    "Art. 1º Esta Lei dispõe sobre o SERP.",
]


class TestTitleAndSummary:
    def test_titulo(self):
        assert find_title(LINES) == ("LEI Nº 14.382, DE 27 DE JUNHO DE 2022", 2)

    def test_sem_titulo(self):
        assert find_title(["Texto qualquer"]) == ("", -1)

    def test_ementa_ate_preambulo(self):
        _, idx = find_title(LINES)
        assert extract_summary(LINES, idx) == (
            "Conversão da Medida Provisória nº 1.085, de 2021 "
            "Dispõe sobre o Sistema Eletrônico dos Registros Públicos."
        )

    def test_ementa_para_em_o_seguinte(self):
        lines = ["LEI Nº 1, DE 1º DE MAIO DE 1943", "Aprova a Consolidação e decreta o seguinte:", "Outra linha longa aqui"]
        assert extract_summary(lines, 0) == "Aprova a Consolidação e decreta o seguinte:"

    def test_ementa_limitada(self):
        lines = ["LEI Nº 1, DE 2 DE MAIO DE 1990"] + ["x" * 300] * 5
        assert len(extract_summary(lines, 0)) == 800

    def test_ementa_sem_titulo(self):
        assert extract_summary(LINES, -1) == ""


class TestActType:
    @pytest.mark.parametrize("title,expected", [
        ("LEI Nº 14.382, DE 27 DE JUNHO DE 2022", ActType.ORDINARY_LAW),
        ("LEI COMPLEMENTAR Nº 187, DE 16 DE DEZEMBRO DE 2021", ActType.COMPLEMENTARY_LAW),
        ("DECRETO-LEI Nº 2.848, DE 7 DE DEZEMBRO DE 1940", ActType.DECREE_LAW),
        ("DECRETO Nº 9.830, DE 10 DE JUNHO DE 2019", ActType.DECREE),
        ("MEDIDA PROVISÓRIA Nº 1.108, DE 25 DE MARÇO DE 2022", ActType.PROVISIONAL_MEASURE),
        ("EMENDA CONSTITUCIONAL Nº 45, DE 30 DE DEZEMBRO DE 2004", ActType.CONSTITUTIONAL_AMENDMENT),
        ("CONSTITUIÇÃO DA REPÚBLICA FEDERATIVA DO BRASIL DE 1988", ActType.CONSTITUTION),
        ("PORTARIA Nº 1", ActType.OTHER),
        ("", ActType.OTHER),
    ])
    def test_tipos(self, title, expected):
        assert classify_act_type(title) == expected


class TestPublicationDate:
    def test_data_por_extenso(self):
        assert parse_publication_date("LEI Nº 14.382, DE 27 DE JUNHO DE 2022") == date(2022, 6, 27)

    def test_ordinal_no_dia(self):
        assert parse_publication_date("DECRETO-LEI Nº 5.452, DE 1º DE MAIO DE 1943") == date(1943, 5, 1)

    def test_marco_com_cedilha(self):
        assert parse_publication_date("MEDIDA PROVISÓRIA Nº 1.108, DE 25 DE MARÇO DE 2022") == date(2022, 3, 25)

    def test_mes_desconhecido(self):
        assert parse_publication_date("LEI Nº 1, DE 10 DE BRUMARIO DE 2022") is None

    def test_data_invalida(self):
        assert parse_publication_date("LEI Nº 1, DE 31 DE FEVEREIRO DE 2022") is None

    def test_sem_data(self):
        assert parse_publication_date("LEI Nº 1") is None


class TestHeadings:
    def test_coleta_deduplicada(self):
        lines = ["LIVRO I", "TÍTULO I", "CAPÍTULO I", "Seção I", "CAPÍTULO II", "CAPÍTULO I", "Texto"]
        h = collect_headings(lines)
        assert h.books == ["LIVRO I"]
        assert h.titles == ["TÍTULO I"]
        assert h.chapters == ["CAPÍTULO I", "CAPÍTULO II"]
        assert h.sections == ["Seção I"]

    def test_corta_em_200(self):
        h = collect_headings(["CAPÍTULO I " + "X" * 400])
        assert len(h.chapters[0]) == 200

    def test_to_dict(self):
        assert collect_headings([]).to_dict() == {"livros": [], "titulos": [], "capitulos": [], "secoes": []}
