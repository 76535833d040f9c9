# vademecum/api/formatar_lei_local.py
"""
POST /api/legal/formatar-lei-local

Body JSON:
    textoBruto: str  (obrigatorio) texto de lei ja extraido
"""
from __future__ import annotations

import logging

import azure.functions as func

from vademecum.api.http import json_response, read_json_body
from vademecum.legal.pipeline import format_local

logger = logging.getLogger(__name__)


def handle_formatar_lei_local(req: func.HttpRequest) -> func.HttpResponse:
    body = read_json_body(req)
    raw_text = body.get("textoBruto")
    if not raw_text:
        return json_response({"success": False, "error": "Texto bruto é obrigatório"}, 400)

    logger.info("formatar-lei-local: %d caracteres", len(raw_text))
    result = format_local(raw_text)
    return json_response(result, 200 if result.get("success") else 500)
