"""Product catalog served by an external HTTP API."""
import logging
import uuid

import httpx

from price_alerts.catalog.catalog_abc import ProductCatalog
from price_alerts.core.exceptions import CatalogUnavailable
from price_alerts.schemas import Product

logger = logging.getLogger(__name__)


class HttpProductCatalog(ProductCatalog):
    """Resolves products via ``GET {base_url}/products/{id}``.

    The endpoint is expected to answer with ``{"id", "name", "currentPrice",
    "currency"}``; a 404 means the product does not exist. Lookups from the
    event loop go through an ``httpx.AsyncClient``; the stores, which run in
    worker threads, use the blocking client.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the catalog clients.

        Args:
            base_url: Catalog API root (e.g. "http://catalog:3001/api").
            timeout: Per-request timeout in seconds.
            client: Optional preconfigured blocking client (tests use a MockTransport).
            async_client: Optional preconfigured async client.
        """
        headers = {"Accept": "application/json"}
        self._client = client or httpx.Client(
            base_url=base_url, timeout=timeout, headers=headers
        )
        self._async_client = async_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=headers
        )

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        try:
            response = self._client.get(f"/products/{product_id}")
        except httpx.HTTPError as exc:
            logger.warning("Catalog request for %s failed: %s", product_id, exc)
            raise CatalogUnavailable(str(exc)) from exc
        return _product_from_response(response)

    async def fetch_product(self, product_id: uuid.UUID) -> Product | None:
        try:
            response = await self._async_client.get(f"/products/{product_id}")
        except httpx.HTTPError as exc:
            logger.warning("Catalog request for %s failed: %s", product_id, exc)
            raise CatalogUnavailable(str(exc)) from exc
        return _product_from_response(response)

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._async_client.aclose()
        self._client.close()


def _product_from_response(response: httpx.Response) -> Product | None:
    if response.status_code == 404:
        return None
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise CatalogUnavailable(f"Catalog answered {response.status_code}") from exc

    data = response.json()
    # Some catalog deployments wrap the record: {"product": {...}}.
    if isinstance(data, dict) and "product" in data:
        data = data["product"]
    return Product.model_validate(data)
