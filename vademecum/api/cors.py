# vademecum/api/cors.py
from __future__ import annotations

import os
import azure.functions as func

# Origins permitidas: VADEMECUM_ALLOWED_ORIGINS (separadas por virgula).
# Sem a env var, localhost e liberado quando VADEMECUM_ENV != "production".

_DEV_ORIGINS = {
    "http://localhost:8080",
    "http://localhost:5173",
    "http://localhost:3000",
}


def get_allowed_origins() -> set[str]:
    """Recalcula a cada chamada (hot-reload de env vars)."""
    env_origins = os.environ.get("VADEMECUM_ALLOWED_ORIGINS", "")
    if env_origins:
        return {o.strip() for o in env_origins.split(",") if o.strip()}
    if os.environ.get("VADEMECUM_ENV", "development") != "production":
        return set(_DEV_ORIGINS)
    return set()


def cors_headers(req: func.HttpRequest) -> dict:
    origin = req.headers.get("Origin")
    allow_origin = origin if origin in get_allowed_origins() else ""
    if not allow_origin:
        return {"Vary": "Origin"}
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Vary": "Origin",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
        "Access-Control-Allow-Headers": "authorization,x-client-info,apikey,content-type,x-functions-key",
        "Access-Control-Max-Age": "86400",
    }


def cors_preflight(req: func.HttpRequest) -> func.HttpResponse:
    return func.HttpResponse("", status_code=204, headers=cors_headers(req))
