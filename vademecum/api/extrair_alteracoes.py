# vademecum/api/extrair_alteracoes.py
"""
POST /api/legal/extrair-alteracoes

Body JSON:
    tableName: str  (obrigatorio) tabela com os artigos da lei
    action: str     (opcional) "delete" apenas apaga o historico

Sempre substitui o historico inteiro da tabela (apaga e reinsere).
"""
from __future__ import annotations

import logging

import azure.functions as func

from vademecum.api.http import json_response, read_json_body
from vademecum.legal.pipeline import extract_table_amendments

logger = logging.getLogger(__name__)


def handle_extrair_alteracoes(req: func.HttpRequest) -> func.HttpResponse:
    body = read_json_body(req)
    table_name = body.get("tableName")
    if not table_name:
        return json_response({"success": False, "error": "tableName é obrigatório"}, 400)

    logger.info("extrair-alteracoes: tabela=%s action=%s", table_name, body.get("action") or "extrair")
    result = extract_table_amendments(table_name, action=body.get("action"))
    return json_response(result, 200 if result.get("success") else 500)
