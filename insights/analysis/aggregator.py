"""
Data aggregation from the internal CRM services.

Four independent reads run concurrently for every analysis request:
    - leads:    GET /api/leads (scoped by the `user` cookie), body is the array
    - partners: GET /api/sankhya/parceiros?page&pageSize, array under "parceiros"
    - products: GET /api/sankhya/produtos?page&pageSize, array under "produtos"
    - orders:   GET /api/sankhya/pedidos/listar?userId, body is the array

Each source degrades to an empty list on its own. A transport-level failure
during the fan-out collapses the whole snapshot to four empty lists.
"""
import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class SourceResult:
    """
    Outcome of reading one upstream source.

    `records` is None when the source was absent or invalid (non-2xx status,
    undecodable body, or the expected array missing).
    """
    source: str
    records: Optional[List[Any]]
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.records is not None

    def records_or_empty(self) -> List[Any]:
        return list(self.records) if self.records is not None else []


@dataclass
class SystemData:
    """Per-request snapshot of the four CRM collections."""
    leads: List[Any] = field(default_factory=list)
    partners: List[Any] = field(default_factory=list)
    products: List[Any] = field(default_factory=list)
    orders: List[Any] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "SystemData":
        return cls()

    def counts(self) -> Dict[str, int]:
        return {
            "leads": len(self.leads),
            "partners": len(self.partners),
            "products": len(self.products),
            "orders": len(self.orders),
        }


def extract_records(source: str, response: httpx.Response, field_name: Optional[str] = None) -> SourceResult:
    """
    Turn an upstream response into a SourceResult.

    Args:
        source: Source name used in logs and the result
        response: The upstream HTTP response
        field_name: Key holding the array in an object body; None when the
            body itself is the array

    Returns:
        SourceResult, invalid when the status or the body shape is unexpected
    """
    if not response.is_success:
        return SourceResult(source, None, response.status_code, f"HTTP {response.status_code}")

    try:
        body = response.json()
    except ValueError as e:
        return SourceResult(source, None, response.status_code, f"invalid JSON body: {e}")

    payload = body
    if field_name is not None:
        payload = body.get(field_name) if isinstance(body, dict) else None

    if not isinstance(payload, list):
        expected = f"'{field_name}' array" if field_name else "array"
        return SourceResult(source, None, response.status_code, f"expected {expected}")

    return SourceResult(source, payload, response.status_code)


class DataAggregator:
    """
    Fetches the leads, partners, products and orders collections in parallel.

    Usage:
        aggregator = DataAggregator("http://localhost:5000")
        data = await aggregator.aggregate(user_id=7)
    """

    DEFAULT_ENDPOINTS = {
        "leads": "/api/leads",
        "partners": "/api/sankhya/parceiros",
        "products": "/api/sankhya/produtos",
        "orders": "/api/sankhya/pedidos/listar",
    }

    def __init__(
        self,
        base_url: str,
        endpoints: Optional[Dict[str, str]] = None,
        page: int = 1,
        page_size: int = 100,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Base URL of the internal services
            endpoints: Path per source; missing entries use DEFAULT_ENDPOINTS
            page: Page requested from the paginated listings
            page_size: Page size requested from the paginated listings
            timeout: Per-request timeout in seconds; None waits indefinitely
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.endpoints = {**self.DEFAULT_ENDPOINTS, **(endpoints or {})}
        self.page = page
        self.page_size = page_size
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None) -> "DataAggregator":
        """Build an aggregator from a SERVICES_CONFIG-shaped dict."""
        return cls(
            base_url=config["base_url"],
            endpoints=config.get("endpoints"),
            page=config.get("page", 1),
            page_size=config.get("page_size", 100),
            timeout=config.get("timeout"),
            transport=transport,
        )

    def _pagination(self) -> Dict[str, int]:
        return {"page": self.page, "pageSize": self.page_size}

    async def _fetch_leads(self, client: httpx.AsyncClient, user_id: int) -> SourceResult:
        user_cookie = json.dumps({"id": user_id}, separators=(",", ":"))
        response = await client.get(
            self.endpoints["leads"],
            headers={"Cookie": f"user={user_cookie}"},
        )
        return extract_records("leads", response)

    async def _fetch_partners(self, client: httpx.AsyncClient) -> SourceResult:
        response = await client.get(self.endpoints["partners"], params=self._pagination())
        return extract_records("partners", response, "parceiros")

    async def _fetch_products(self, client: httpx.AsyncClient) -> SourceResult:
        response = await client.get(self.endpoints["products"], params=self._pagination())
        return extract_records("products", response, "produtos")

    async def _fetch_orders(self, client: httpx.AsyncClient, user_id: int) -> SourceResult:
        response = await client.get(self.endpoints["orders"], params={"userId": user_id})
        return extract_records("orders", response)

    async def fetch_sources(self, user_id: int) -> List[SourceResult]:
        """
        Issue the four reads concurrently and wait for all of them.

        When one read fails the others are cancelled and awaited before the
        client closes, so no request outlives this call.

        Raises:
            httpx.HTTPError: on a transport-level failure of any source
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            tasks = [
                asyncio.ensure_future(self._fetch_leads(client, user_id)),
                asyncio.ensure_future(self._fetch_partners(client)),
                asyncio.ensure_future(self._fetch_products(client)),
                asyncio.ensure_future(self._fetch_orders(client, user_id)),
            ]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        return list(results)

    async def aggregate(self, user_id: int) -> SystemData:
        """
        Build the SystemData snapshot for a user. Never raises.

        Args:
            user_id: User identifier from the session cookie (0 when anonymous)

        Returns:
            SystemData with every collection guaranteed to be a list
        """
        try:
            results = await self.fetch_sources(user_id)
        except Exception as e:
            logger.error(f"Erro ao buscar dados: {e!r}")
            return SystemData.empty()

        for result in results:
            if not result.is_valid:
                logger.warning(f"Source '{result.source}' unavailable, using empty list: {result.error}")

        leads, partners, products, orders = results
        data = SystemData(
            leads=leads.records_or_empty(),
            partners=partners.records_or_empty(),
            products=products.records_or_empty(),
            orders=orders.records_or_empty(),
        )
        logger.info(f"Aggregated system data for user {user_id}: {data.counts()}")
        return data
