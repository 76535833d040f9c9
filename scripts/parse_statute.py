#!/usr/bin/env python3
"""
Parser de lei local: HTML/texto -> JSON, sem Azure Functions.

Uso:
    python scripts/parse_statute.py --html lei.htm                  # documento completo
    python scripts/parse_statute.py --text lei.txt                  # texto ja normalizado
    python scripts/parse_statute.py --text lei.txt --format         # formatador linha-a-linha
    python scripts/parse_statute.py --amendments lei.txt --table codigo_civil
    python scripts/parse_statute.py --url https://www.planalto.gov.br/ccivil_03/leis/l8078compilado.htm

Requer (so para --url):
    BROWSERLESS_API_KEY (env var)
"""
from __future__ import annotations

import sys
import os
import json
import logging
import argparse

# Adiciona raiz do projeto ao path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from vademecum.legal.amendments import extract_document_amendments
from vademecum.legal.html_normalizer import html_to_text
from vademecum.legal.pipeline import (
    document_to_dict,
    format_local,
    parse_statute_html,
    parse_statute_text,
    scrape_planalto,
)
from vademecum.legal.segmenter import segment_articles


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    parser = argparse.ArgumentParser(description="Parser de legislacao do Planalto")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--html", type=str, help="Arquivo HTML renderizado")
    src.add_argument("--text", type=str, help="Arquivo de texto da lei")
    src.add_argument("--amendments", type=str, help="Arquivo (HTML ou texto) para extrair alteracoes")
    src.add_argument("--url", type=str, help="URL do Planalto (via Browserless)")
    parser.add_argument("--format", action="store_true", help="Com --text: usa o formatador linha-a-linha")
    parser.add_argument("--table", type=str, default="local", help="Nome do documento/tabela (--amendments)")
    parser.add_argument("--output", type=str, default=None, help="Path para salvar resultado JSON")
    args = parser.parse_args()

    if args.url:
        result = scrape_planalto(args.url)
    elif args.html:
        result = {"success": True, **document_to_dict(parse_statute_html(_read(args.html)))}
    elif args.text and args.format:
        result = format_local(_read(args.text))
    elif args.text:
        result = {"success": True, **document_to_dict(parse_statute_text(_read(args.text)))}
    else:
        raw = _read(args.amendments)
        text = html_to_text(raw) if args.amendments.lower().endswith((".htm", ".html")) else raw
        articles = segment_articles(text)
        report = extract_document_amendments([(a.key, a.text) for a in articles], args.table)
        result = {
            "success": True,
            "tabela": args.table,
            "totalArtigos": report.total_articles,
            "artigosComAlteracao": report.articles_with_changes,
            "totalAlteracoes": len(report.annotations),
            "tiposEncontrados": report.change_types,
            "elementosEncontrados": report.element_types,
            "alteracoes": [a.to_row() for a in report.annotations],
        }

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2, ensure_ascii=False, default=str)
        print(f"Resultado salvo em: {args.output}")
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))

    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
