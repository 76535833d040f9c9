# vademecum/api/raspar_planalto.py
"""
POST /api/legal/raspar-planalto

Body JSON:
    urlPlanalto: str  (obrigatorio)
    tableName: str    (opcional, so informativo)
"""
from __future__ import annotations

import logging

import azure.functions as func

from vademecum import config
from vademecum.api.http import json_response, read_json_body
from vademecum.legal.pipeline import scrape_planalto

logger = logging.getLogger(__name__)


def handle_raspar_planalto(req: func.HttpRequest) -> func.HttpResponse:
    body = read_json_body(req)
    url = body.get("urlPlanalto")
    if not url:
        return json_response({"success": False, "error": "URL do Planalto é obrigatória"}, 400)

    ok, msg = config.validate_browserless_config()
    if not ok:
        return json_response({"success": False, "error": msg}, 500)

    logger.info("raspar-planalto: %s", url)

    result = scrape_planalto(url, table_name=body.get("tableName"))
    return json_response(result, 200 if result.get("success") else 500)
