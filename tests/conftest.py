"""
Shared fixtures: a mock transport standing in for the internal CRM services
and helpers to build an AnalysisService around a fake chat model.
"""
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from langchain_core.language_models import FakeListChatModel

# Add project root to path (parent of tests folder)
sys.path.insert(0, str(Path(__file__).parent.parent))

from insights.analysis import AnalysisService, DataAggregator, PromptComposer, WidgetAnalyst
from insights.config import DEFAULT_WIDGET_TYPES

BASE_URL = "http://crm.test"

LEADS_PATH = "/api/leads"
PARTNERS_PATH = "/api/sankhya/parceiros"
PRODUCTS_PATH = "/api/sankhya/produtos"
ORDERS_PATH = "/api/sankhya/pedidos/listar"


def make_transport(
    routes: Dict[str, Any],
    seen: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """
    Build a MockTransport from a path → response mapping.

    A value may be an (status, json_body) tuple, an httpx.Response factory
    taking the request, or an exception instance to raise.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def crm_routes() -> Dict[str, Any]:
    """Healthy responses from all four services."""
    return {
        LEADS_PATH: (200, [{"CODLEAD": 1, "NOME": "Lead Alfa", "ESTAGIO": "Proposta"}]),
        PARTNERS_PATH: (200, {"parceiros": [{"CODPARC": 10, "NOMEPARC": "Cliente Beta"}], "total": 1}),
        PRODUCTS_PATH: (200, {"produtos": [{"CODPROD": 100, "DESCRPROD": "Produto Gama"}], "total": 1}),
        ORDERS_PATH: (200, [{"NUNOTA": 5000, "VLRNOTA": 1500.0}]),
    }


@pytest.fixture
def seen_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def build_service() -> Callable[..., AnalysisService]:
    """Factory for an AnalysisService with mocked services and a fake model."""
    def _build(
        routes: Dict[str, Any],
        responses: Optional[List[str]] = None,
        seen: Optional[List[httpx.Request]] = None,
        llm=None,
    ) -> AnalysisService:
        aggregator = DataAggregator(BASE_URL, transport=make_transport(routes, seen))
        if llm is None:
            llm = FakeListChatModel(responses=responses or ['{"widgets": []}'])
        return AnalysisService(
            aggregator=aggregator,
            composer=PromptComposer(widget_types=DEFAULT_WIDGET_TYPES),
            analyst=WidgetAnalyst(llm),
        )
    return _build
