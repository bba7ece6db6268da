"""Core abstractions: exceptions, HTTP error mapping and shared helpers."""
from price_alerts.core.error_mapper import AlertErrorMapper
from price_alerts.core.exceptions import (AlertServiceError, AlreadyVerified,
                                          CatalogUnavailable,
                                          DuplicateActiveAlert,
                                          EmailDeliveryFailed, InvalidToken,
                                          NotFoundOrForbidden,
                                          PreferencesNotFound, ProductNotFound)

__all__ = [
    "AlertErrorMapper",
    "AlertServiceError",
    "AlreadyVerified",
    "CatalogUnavailable",
    "DuplicateActiveAlert",
    "EmailDeliveryFailed",
    "InvalidToken",
    "NotFoundOrForbidden",
    "PreferencesNotFound",
    "ProductNotFound",
]
