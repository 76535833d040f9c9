# vademecum/api/http.py
"""Helpers de request/response JSON para os handlers."""
from __future__ import annotations

import json

import azure.functions as func


def json_response(payload: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(payload, ensure_ascii=False),
        status_code=status_code,
        mimetype="application/json",
    )


def read_json_body(req: func.HttpRequest) -> dict:
    """Body JSON ou {} (corpo vazio ou invalido)."""
    try:
        body = req.get_json() if req.get_body() else {}
    except ValueError:
        body = {}
    return body if isinstance(body, dict) else {}
