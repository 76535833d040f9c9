# tests/test_api_handlers.py
"""
Testes dos handlers HTTP e CORS (sem host do Azure Functions).
"""
from __future__ import annotations

import json

import azure.functions as func

from vademecum.api.cors import cors_headers, get_allowed_origins


def _request(route: str, body=None, headers=None) -> func.HttpRequest:
    return func.HttpRequest(
        method="POST",
        url=f"/api/legal/{route}",
        headers=headers or {},
        body=json.dumps(body).encode("utf-8") if body is not None else b"",
    )


def _json(resp: func.HttpResponse) -> dict:
    return json.loads(resp.get_body().decode("utf-8"))


class TestFormatarLeiLocal:
    def test_sem_texto(self):
        from vademecum.api.formatar_lei_local import handle_formatar_lei_local

        resp = handle_formatar_lei_local(_request("formatar-lei-local", {}))
        assert resp.status_code == 400
        assert _json(resp) == {"success": False, "error": "Texto bruto é obrigatório"}

    def test_formata(self):
        from vademecum.api.formatar_lei_local import handle_formatar_lei_local

        resp = handle_formatar_lei_local(_request("formatar-lei-local", {"textoBruto": "Art. 1º Texto do artigo."}))
        assert resp.status_code == 200
        data = _json(resp)
        assert data["success"] is True
        assert data["formatado"] == "[ARTIGO]: Art. 1º Texto do artigo."

    def test_corpo_invalido(self):
        from vademecum.api.formatar_lei_local import handle_formatar_lei_local

        req = func.HttpRequest(method="POST", url="/api/legal/formatar-lei-local", body=b"{nao e json")
        assert handle_formatar_lei_local(req).status_code == 400


class TestRasparPlanalto:
    def test_sem_url(self):
        from vademecum.api.raspar_planalto import handle_raspar_planalto

        resp = handle_raspar_planalto(_request("raspar-planalto", {"tableName": "x"}))
        assert resp.status_code == 400

    def test_sem_chave_browserless(self, monkeypatch):
        from vademecum.api.raspar_planalto import handle_raspar_planalto

        monkeypatch.setattr("vademecum.config.BROWSERLESS_API_KEY", "")
        resp = handle_raspar_planalto(_request("raspar-planalto", {"urlPlanalto": "https://x"}))
        assert resp.status_code == 500
        assert _json(resp)["error"] == "BROWSERLESS_API_KEY não configurada"

    def test_falha_vira_500(self, monkeypatch):
        from vademecum.api.raspar_planalto import handle_raspar_planalto

        monkeypatch.setattr("vademecum.config.BROWSERLESS_API_KEY", "k")
        monkeypatch.setattr(
            "vademecum.api.raspar_planalto.scrape_planalto",
            lambda url, table_name=None: {"success": False, "error": "boom", "revisao": "v"},
        )
        resp = handle_raspar_planalto(_request("raspar-planalto", {"urlPlanalto": "https://x"}))
        assert resp.status_code == 500
        assert _json(resp)["error"] == "boom"


class TestExtrairAlteracoes:
    def test_sem_tabela(self):
        from vademecum.api.extrair_alteracoes import handle_extrair_alteracoes

        resp = handle_extrair_alteracoes(_request("extrair-alteracoes", {}))
        assert resp.status_code == 400

    def test_repasse_da_acao(self, monkeypatch):
        from vademecum.api.extrair_alteracoes import handle_extrair_alteracoes

        seen = {}

        def fake(table_name, action=None):
            seen.update(table=table_name, action=action)
            return {"success": True, "removidos": 3}

        monkeypatch.setattr("vademecum.api.extrair_alteracoes.extract_table_amendments", fake)
        resp = handle_extrair_alteracoes(_request("extrair-alteracoes", {"tableName": "cc", "action": "delete"}))
        assert resp.status_code == 200
        assert seen == {"table": "cc", "action": "delete"}


class TestCors:
    def test_origem_permitida(self, monkeypatch):
        monkeypatch.setenv("VADEMECUM_ALLOWED_ORIGINS", "https://app.exemplo.com.br")
        req = _request("formatar-lei-local", {}, headers={"Origin": "https://app.exemplo.com.br"})
        headers = cors_headers(req)
        assert headers["Access-Control-Allow-Origin"] == "https://app.exemplo.com.br"

    def test_origem_desconhecida(self, monkeypatch):
        monkeypatch.setenv("VADEMECUM_ALLOWED_ORIGINS", "https://app.exemplo.com.br")
        req = _request("formatar-lei-local", {}, headers={"Origin": "https://evil.example"})
        assert cors_headers(req) == {"Vary": "Origin"}

    def test_localhost_fora_de_producao(self, monkeypatch):
        monkeypatch.delenv("VADEMECUM_ALLOWED_ORIGINS", raising=False)
        monkeypatch.setenv("VADEMECUM_ENV", "development")
        assert "http://localhost:5173" in get_allowed_origins()
        monkeypatch.setenv("VADEMECUM_ENV", "production")
        assert get_allowed_origins() == set()
