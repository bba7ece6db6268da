"""Domain concept for mapping service exceptions to HTTP responses."""
from dataclasses import dataclass

from fastapi import HTTPException

from price_alerts.core.exceptions import (AlreadyVerified, CatalogUnavailable,
                                          DuplicateActiveAlert,
                                          EmailDeliveryFailed, InvalidToken,
                                          NotFoundOrForbidden,
                                          PreferencesNotFound, ProductNotFound)


@dataclass(frozen=True)
class AlertErrorMapper:
    """Maps store/service exceptions to HTTP (status_code, detail).

    Inject one per router so 404 messages name the right resource
    (e.g. "Alert", "Anonymous alert").
    """

    resource_name: str = "Resource"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses.

        Args:
            exc: The exception raised by a store or service.

        Returns:
            (status_code, detail) suitable for HTTPException(status_code=..., detail=...).
        """
        if isinstance(exc, DuplicateActiveAlert):
            return (409, str(exc))
        if isinstance(exc, ProductNotFound):
            return (404, str(exc))
        if isinstance(exc, NotFoundOrForbidden):
            return (404, str(exc) or f"{self.resource_name} not found")
        if isinstance(exc, PreferencesNotFound):
            return (404, str(exc))
        if isinstance(exc, InvalidToken):
            return (404, f"{self.resource_name} not found: {exc}")
        if isinstance(exc, AlreadyVerified):
            return (400, str(exc))
        if isinstance(exc, CatalogUnavailable):
            return (502, "Product catalog error")
        if isinstance(exc, EmailDeliveryFailed):
            return (502, "E-mail could not be sent")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        raise HTTPException(status_code=status_code, detail=detail) from exc
