# vademecum/config.py
"""
Configuracao centralizada, lida de env vars na importacao.

BROWSERLESS_API_KEY vazia: raspagem responde erro 500 "nao configurada",
o parsing local (texto/HTML ja baixado) continua funcionando.
"""
import os
import logging

logger = logging.getLogger(__name__)

REVISION = "v1.4.0"

# ─── Browserless (render de paginas do Planalto) ──────────────────
BROWSERLESS_API_KEY = os.environ.get("BROWSERLESS_API_KEY", "")
BROWSERLESS_BASE_URL = os.environ.get("BROWSERLESS_BASE_URL", "https://production-sfo.browserless.io")
BROWSERLESS_TIMEOUT_MS = int(os.environ.get("BROWSERLESS_TIMEOUT_MS", "30000"))

# ─── HTTP client ──────────────────────────────────────────────────
HTTP_TIMEOUT_SECONDS = int(os.environ.get("HTTP_TIMEOUT_SECONDS", "60"))
HTTP_MAX_RETRIES = int(os.environ.get("HTTP_MAX_RETRIES", "3"))

# ─── Historico de alteracoes ──────────────────────────────────────
AMENDMENTS_TABLE = os.environ.get("AMENDMENTS_TABLE", "historico_alteracoes")
AMENDMENTS_BATCH_SIZE = min(int(os.environ.get("AMENDMENTS_BATCH_SIZE", "100")), 100)


def validate_browserless_config() -> tuple:
    """
    Valida configuracao da raspagem.
    Returns: (ok: bool, error_message: str)
    """
    if not BROWSERLESS_API_KEY:
        msg = "BROWSERLESS_API_KEY não configurada"
        logger.error(msg)
        return False, msg
    logger.info("vademecum config: browserless base=%s timeout=%dms", BROWSERLESS_BASE_URL, BROWSERLESS_TIMEOUT_MS)
    return True, ""
