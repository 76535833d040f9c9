# vademecum/legal/browserless.py
"""
Cliente da API /content do Browserless: devolve o HTML da pagina depois de
renderizada (o Planalto monta parte do texto com JS e bloqueia scrapers
simples).
"""
from __future__ import annotations

import time
import logging

import requests

from vademecum import config
from vademecum.legal.errors import ConfigError, RenderError

logger = logging.getLogger(__name__)


def _render_payload(url: str) -> dict:
    return {
        "url": url,
        "gotoOptions": {
            "waitUntil": "networkidle2",
            "timeout": config.BROWSERLESS_TIMEOUT_MS,
        },
    }


def _call_browserless(url: str) -> str:
    resp = requests.post(
        f"{config.BROWSERLESS_BASE_URL.rstrip('/')}/content",
        params={"token": config.BROWSERLESS_API_KEY},
        headers={"Content-Type": "application/json"},
        json=_render_payload(url),
        timeout=config.HTTP_TIMEOUT_SECONDS,
    )
    if not resp.ok:
        raise RenderError(
            f"Browserless error: {resp.status_code}",
            status_code=resp.status_code,
            details=resp.text,
        )
    return resp.text


def fetch_rendered_html(url: str) -> str:
    """
    HTML renderizado de uma URL.

    Erros de transporte (timeout, conexao) sao repetidos com backoff linear;
    resposta HTTP nao-2xx nao e repetida.

    Raises:
        ConfigError: BROWSERLESS_API_KEY ausente
        RenderError: status nao-2xx ou tentativas esgotadas
    """
    if not config.BROWSERLESS_API_KEY:
        raise ConfigError("BROWSERLESS_API_KEY não configurada")

    attempts = max(1, config.HTTP_MAX_RETRIES)
    last_error = None

    for attempt in range(1, attempts + 1):
        try:
            html = _call_browserless(url)
            logger.info("browserless: %s -> %d chars (tentativa %d)", url, len(html), attempt)
            return html
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            last_error = e
            logger.warning("browserless: tentativa %d falhou para %s: %s", attempt, url, e)
            if attempt < attempts:
                time.sleep(3 * attempt)

    raise RenderError(f"Browserless indisponivel apos {attempts} tentativas: {last_error}")
