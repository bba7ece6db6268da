"""Product catalog backed by the shared relational database."""
import uuid

from sqlalchemy.engine import Engine

from price_alerts.catalog.catalog_abc import ProductCatalog
from price_alerts.db.mappers import product_from_row
from price_alerts.db.models import ProductRow
from price_alerts.db.sessions import session_scope
from price_alerts.schemas import Product


class SqlProductCatalog(ProductCatalog):
    """Reads products from the ``product`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_product(self, product_id: uuid.UUID) -> Product | None:
        with session_scope(self._engine) as session:
            row = session.get(ProductRow, product_id)
            return product_from_row(row) if row is not None else None

    def add_product(self, name: str, current_price: int, currency: str = "USD") -> Product:
        """Insert a product (seeding and local runs)."""
        with session_scope(self._engine) as session:
            row = ProductRow(name=name, current_price=current_price, currency=currency)
            session.add(row)
            session.flush()
            return product_from_row(row)

    def set_price(self, product_id: uuid.UUID, current_price: int) -> Product | None:
        """Record a new current price; returns None for unknown products."""
        with session_scope(self._engine) as session:
            row = session.get(ProductRow, product_id)
            if row is None:
                return None
            row.current_price = current_price
            session.add(row)
            session.flush()
            return product_from_row(row)
