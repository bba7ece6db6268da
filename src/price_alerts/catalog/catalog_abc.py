"""Abstract base class for product catalog lookups."""
import asyncio
import uuid
from abc import ABC, abstractmethod

from price_alerts.schemas import Product


class ProductCatalog(ABC):
    """Read-only interface to the product catalog.

    The catalog is owned elsewhere (search / scraping side of the application);
    this service only resolves a product id to its name and current price.
    Synchronous callers (the stores) use ``get_product``; code running on the
    event loop uses ``fetch_product``.
    """

    @abstractmethod
    def get_product(self, product_id: uuid.UUID) -> Product | None:
        """Resolve a product.

        Args:
            product_id: Catalog id of the product.

        Returns:
            The product, or None when the catalog does not know the id.
        """

    async def fetch_product(self, product_id: uuid.UUID) -> Product | None:
        """Resolve a product without blocking the event loop.

        Runs ``get_product`` in a worker thread; override with a native async
        lookup where the backend offers one.
        """
        return await asyncio.to_thread(self.get_product, product_id)

    def close(self) -> None:
        """Release resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def aclose(self) -> None:
        """Release resources from async code (application shutdown)."""
        self.close()

    def __enter__(self) -> "ProductCatalog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()
