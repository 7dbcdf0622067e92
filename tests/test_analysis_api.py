"""
Tests for the /api/gemini/analise endpoint.
"""
import pytest
from fastapi.testclient import TestClient
from langchain_core.runnables import RunnableLambda

from api.main import create_app
from insights.analysis import AnalysisService, DataAggregator, PromptComposer
from conftest import LEADS_PATH, ORDERS_PATH, PRODUCTS_PATH

ANALYSIS_URL = "/api/gemini/analise"
ERROR_BODY = {"error": "Erro ao processar análise", "widgets": []}
QUESTION = {"prompt": "Quais foram os produtos mais vendidos este mês?"}


def client_for(service) -> TestClient:
    return TestClient(create_app(analysis_service=service))


def test_health_check():
    response = client_for(None).get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_fenced_model_output_is_returned(build_service, crm_routes):
    service = build_service(crm_routes, responses=['```json\n{"widgets":[]}\n```'])
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"widgets": []}


def test_widget_payload_is_passed_through(build_service, crm_routes):
    widgets = '{"widgets": [{"tipo": "card", "titulo": "Total de Vendas", "dados": {"valor": 150000}}], "observacao": "ok"}'
    service = build_service(crm_routes, responses=[widgets])
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 200
    assert response.json() == {
        "widgets": [{"tipo": "card", "titulo": "Total de Vendas", "dados": {"valor": 150000}}],
        "observacao": "ok",
    }


def test_prose_model_output_returns_error(build_service, crm_routes):
    service = build_service(crm_routes, responses=["Desculpe, não consegui analisar os dados."])
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == ERROR_BODY


def test_missing_cookie_scopes_to_anonymous_user(build_service, crm_routes, seen_requests):
    service = build_service(crm_routes, seen=seen_requests)
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 200
    by_path = {request.url.path: request for request in seen_requests}
    assert by_path[LEADS_PATH].headers["cookie"] == 'user={"id":0}'
    assert by_path[ORDERS_PATH].url.params["userId"] == "0"


def test_session_cookie_scopes_requests(build_service, crm_routes, seen_requests):
    service = build_service(crm_routes, seen=seen_requests)
    response = client_for(service).post(
        ANALYSIS_URL,
        json=QUESTION,
        headers={"Cookie": "user=%7B%22id%22%3A12%7D"},
    )

    assert response.status_code == 200
    by_path = {request.url.path: request for request in seen_requests}
    assert by_path[LEADS_PATH].headers["cookie"] == 'user={"id":12}'
    assert by_path[ORDERS_PATH].url.params["userId"] == "12"


def test_corrupt_cookie_does_not_fail_request(build_service, crm_routes, seen_requests):
    service = build_service(crm_routes, seen=seen_requests)
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION, headers={"Cookie": "user=garbage"})

    assert response.status_code == 200
    orders = next(r for r in seen_requests if r.url.path == ORDERS_PATH)
    assert orders.url.params["userId"] == "0"


def test_upstream_outage_still_answers(build_service, crm_routes):
    crm_routes[PRODUCTS_PATH] = (500, {"error": "falha"})
    crm_routes[LEADS_PATH] = (401, {"error": "não autorizado"})
    service = build_service(crm_routes)
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 200
    assert response.json() == {"widgets": []}


def test_model_failure_returns_error(build_service, crm_routes):
    def failing_model(messages):
        raise RuntimeError("model unavailable")

    service = build_service(crm_routes, llm=RunnableLambda(failing_model))
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 500
    assert response.json() == ERROR_BODY


def test_unconfigured_model_returns_error(crm_routes):
    from conftest import BASE_URL, make_transport

    service = AnalysisService(
        aggregator=DataAggregator(BASE_URL, transport=make_transport(crm_routes)),
        composer=PromptComposer(),
        analyst=None,
    )
    response = client_for(service).post(ANALYSIS_URL, json=QUESTION)

    assert response.status_code == 500
    assert response.json() == ERROR_BODY


@pytest.mark.parametrize("kwargs", [
    {"content": "isto não é json", "headers": {"Content-Type": "application/json"}},
    {"json": {"pergunta": "sem o campo prompt"}},
    {"json": {"prompt": 123}},
])
def test_invalid_body_returns_error(build_service, crm_routes, kwargs):
    service = build_service(crm_routes)
    response = client_for(service).post(ANALYSIS_URL, **kwargs)

    assert response.status_code == 500
    assert response.json() == ERROR_BODY


def test_malformed_cookie_id_falls_back_to_anonymous(build_service, crm_routes, seen_requests):
    service = build_service(crm_routes, seen=seen_requests)
    response = client_for(service).post(
        ANALYSIS_URL,
        json=QUESTION,
        headers={"Cookie": "user=%7B%22id%22%3A%22--5%22%7D"},
    )

    assert response.status_code == 200
    orders = next(r for r in seen_requests if r.url.path == ORDERS_PATH)
    assert orders.url.params["userId"] == "0"
