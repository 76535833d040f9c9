import azure.functions as func
from vademecum.api.cors import cors_preflight, cors_headers

bp = func.Blueprint()


@bp.function_name(name="raspar_planalto")
@bp.route(route="legal/raspar-planalto", methods=["POST", "OPTIONS"], auth_level=func.AuthLevel.FUNCTION)
def raspar_planalto(req: func.HttpRequest) -> func.HttpResponse:
    """Raspa uma lei do Planalto via Browserless e devolve o documento estruturado."""
    if req.method == "OPTIONS":
        return cors_preflight(req)
    from vademecum.api.raspar_planalto import handle_raspar_planalto
    resp = handle_raspar_planalto(req)
    resp.headers.update(cors_headers(req))
    return resp


@bp.function_name(name="formatar_lei_local")
@bp.route(route="legal/formatar-lei-local", methods=["POST", "OPTIONS"], auth_level=func.AuthLevel.FUNCTION)
def formatar_lei_local(req: func.HttpRequest) -> func.HttpResponse:
    """Formata texto bruto de lei em elementos '[TIPO]: conteudo'."""
    if req.method == "OPTIONS":
        return cors_preflight(req)
    from vademecum.api.formatar_lei_local import handle_formatar_lei_local
    resp = handle_formatar_lei_local(req)
    resp.headers.update(cors_headers(req))
    return resp


@bp.function_name(name="extrair_alteracoes")
@bp.route(route="legal/extrair-alteracoes", methods=["POST", "OPTIONS"], auth_level=func.AuthLevel.FUNCTION)
def extrair_alteracoes(req: func.HttpRequest) -> func.HttpResponse:
    """Extrai o historico de alteracoes dos artigos de uma tabela."""
    if req.method == "OPTIONS":
        return cors_preflight(req)
    from vademecum.api.extrair_alteracoes import handle_extrair_alteracoes
    resp = handle_extrair_alteracoes(req)
    resp.headers.update(cors_headers(req))
    return resp
