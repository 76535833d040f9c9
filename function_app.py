# function_app.py
import logging
import traceback

import azure.functions as func

# ---- Log output visivel no Azure Log Stream ----
logging.basicConfig(level=logging.INFO)

from blueprints.bp_legal import bp as legal_bp

app = func.FunctionApp()


def _safe_error_response(fn_name: str, err: Exception) -> func.HttpResponse:
    """
    Loga o traceback completo e devolve 500 com mensagem curta
    (evita 500 "silencioso" sem stack trace no Log Stream).
    """
    logging.error("%s failed: %s", fn_name, str(err))
    logging.error("Traceback:\n%s", traceback.format_exc())
    return func.HttpResponse(
        f"{fn_name} failed: {type(err).__name__}: {str(err)}",
        status_code=500,
        mimetype="text/plain",
    )


@app.function_name(name="ping")
@app.route(route="ping", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def ping(req: func.HttpRequest) -> func.HttpResponse:
    try:
        from vademecum import config
        return func.HttpResponse(f"pong {config.REVISION}", status_code=200)
    except Exception as e:
        return _safe_error_response("ping", e)


app.register_functions(legal_bp)
