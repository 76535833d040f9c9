# vademecum/legal/pipeline.py
"""
Pipelines de legislacao do Planalto.

  scrape_planalto          URL -> Browserless -> HTML -> documento completo
  parse_statute_html       HTML ja baixado -> StatuteDocument
  parse_statute_text       texto ja normalizado -> StatuteDocument
  format_local             texto bruto -> elementos '[TIPO]: conteudo'
  extract_table_amendments tabela de artigos -> historico_alteracoes

Tudo-ou-nada: funcoes que devolvem dict nunca devolvem documento parcial;
qualquer excecao vira {"success": False, "error": ..., "revisao": ...}.
"""
from __future__ import annotations

import time
import logging
from typing import Callable, Optional

from vademecum import config
from vademecum.legal.amendments import extract_document_amendments
from vademecum.legal.browserless import fetch_rendered_html
from vademecum.legal.formatter import format_statute_text
from vademecum.legal.html_normalizer import html_to_text
from vademecum.legal.metadata import (
    classify_act_type,
    collect_headings,
    extract_summary,
    find_title,
    parse_publication_date,
)
from vademecum.legal.models import StatuteDocument
from vademecum.legal.segmenter import segment_articles

logger = logging.getLogger(__name__)


def _error_result(e: Exception) -> dict:
    return {"success": False, "error": str(e), "revisao": config.REVISION}


# ── Documento ─────────────────────────────────────────────────────────────────

def parse_statute_text(text: str) -> StatuteDocument:
    """Texto normalizado (um paragrafo por linha) -> StatuteDocument."""
    lines = [ln.strip() for ln in (text or "").split("\n") if ln.strip()]

    title, title_index = find_title(lines)
    summary = extract_summary(lines, title_index)
    logger.info("Ementa extraida: %d caracteres", len(summary))

    doc = StatuteDocument(
        title=title,
        summary=summary,
        act_type=classify_act_type(title),
        publication_date=parse_publication_date(title),
        headings=collect_headings(lines),
        articles=segment_articles(text or ""),
        full_text=text or "",
    )
    stats = doc.statistics()
    logger.info(
        "Estrutura: %d livros, %d titulos, %d capitulos, %d secoes, %d artigos",
        stats["livros"], stats["titulos"], stats["capitulos"], stats["secoes"], stats["artigos"],
    )
    return doc


def parse_statute_html(html: str) -> StatuteDocument:
    text = html_to_text(html)
    logger.info("Texto processado: %d caracteres", len(text))
    return parse_statute_text(text)


def document_to_dict(doc: StatuteDocument) -> dict:
    """Serializacao do documento (chaves em portugues, formato da API)."""
    return {
        "metadados": {
            "titulo": doc.title,
            "ementa": doc.summary,
            "presidencia": "",
            "dataPublicacao": doc.publication_date.isoformat() if doc.publication_date else "",
            "tipoNorma": doc.act_type.value,
        },
        "estrutura": doc.headings.to_dict(),
        "artigos": [a.to_dict() for a in doc.articles],
        "textoCompleto": doc.full_text,
        "totalCaracteres": len(doc.full_text),
        "estatisticas": doc.statistics(),
    }


def scrape_planalto(
    url: str,
    table_name: Optional[str] = None,
    fetcher: Callable[[str], str] = fetch_rendered_html,
) -> dict:
    """
    Raspa e estrutura uma lei do Planalto.

    Args:
        url: URL da lei no planalto.gov.br
        table_name: tabela de destino (so informativo)
        fetcher: funcao url -> HTML renderizado

    Returns:
        dict com success, metadados, estrutura, artigos, textoCompleto, ...
    """
    logger.info("raspar-planalto %s: url=%s tabela=%s", config.REVISION, url, table_name or "nao especificada")
    try:
        html = fetcher(url)
        logger.info("HTML recebido: %d caracteres", len(html))
        doc = parse_statute_html(html)
    except Exception as e:
        logger.exception("raspar-planalto: erro geral para %s", url)
        return _error_result(e)

    result = {
        "success": True,
        "metodo": "browserless",
        "revisao": config.REVISION,
        "urlRaspada": url,
    }
    result.update(document_to_dict(doc))
    return result


# ── Formatador local ──────────────────────────────────────────────────────────

def format_local(raw_text: str) -> dict:
    """Texto bruto -> resposta do formatador linha-a-linha."""
    start = time.time()
    try:
        formatted = format_statute_text(raw_text)
    except Exception as e:
        logger.exception("formatar-lei-local: erro")
        return _error_result(e)

    text = formatted.formatted
    return {
        "success": True,
        "formatado": text,
        "elementos": [e.to_dict() for e in formatted.elements],
        "estatisticas": {
            "caracteresEntrada": len(raw_text or ""),
            "caracteresSaida": len(text),
            "totalElementos": len(formatted.elements),
            "tempoMs": int((time.time() - start) * 1000),
        },
        "revisao": config.REVISION,
    }


# ── Historico de alteracoes ───────────────────────────────────────────────────

def extract_table_amendments(
    table_name: str,
    action: Optional[str] = None,
    persist: bool = True,
) -> dict:
    """
    Extrai o historico de alteracoes dos artigos de uma tabela.

    Args:
        table_name: tabela com colunas "Número do Artigo" e "Artigo"
        action: "delete" apenas apaga o historico da tabela
        persist: False para so extrair (sem apagar/inserir)

    Returns:
        dict com contagens e tipos encontrados
    """
    from vademecum.legal import db_writer

    try:
        if action == "delete":
            logger.info("extrair-alteracoes: deletando historico de %s", table_name)
            deleted = db_writer.delete_amendments(table_name)
            return {
                "success": True,
                "message": f"Histórico de {table_name} deletado",
                "removidos": deleted,
            }

        articles = db_writer.fetch_articles(table_name)
        report = extract_document_amendments(articles, table_name)

        inserted = 0
        if persist:
            inserted = db_writer.replace_amendments(table_name, report.annotations)["inserted"]
    except Exception as e:
        logger.exception("extrair-alteracoes: erro em %s", table_name)
        return _error_result(e)

    return {
        "success": True,
        "tabela": table_name,
        "totalArtigos": report.total_articles,
        "artigosComAlteracao": report.articles_with_changes,
        "totalAlteracoes": len(report.annotations),
        "totalInseridas": inserted,
        "tiposEncontrados": report.change_types,
        "elementosEncontrados": report.element_types,
    }
