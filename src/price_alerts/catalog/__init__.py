"""Product catalog collaborators (read-only)."""
from price_alerts.catalog.catalog_abc import ProductCatalog
from price_alerts.catalog.http_catalog import HttpProductCatalog
from price_alerts.catalog.sql_catalog import SqlProductCatalog

__all__ = ["HttpProductCatalog", "ProductCatalog", "SqlProductCatalog"]
