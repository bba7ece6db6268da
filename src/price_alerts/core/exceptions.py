"""Domain exceptions raised by the stores and services."""


class AlertServiceError(Exception):
    """Base class for expected, caller-visible failures."""


class DuplicateActiveAlert(AlertServiceError):
    """An active alert already exists for this owner and product."""

    def __init__(self, message: str = "An active alert already exists for this product") -> None:
        super().__init__(message)


class ProductNotFound(AlertServiceError):
    def __init__(self, product_id: object) -> None:
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class NotFoundOrForbidden(AlertServiceError):
    """The alert does not exist or is owned by someone else.

    Both cases share one error so non-owners learn nothing about existence.
    """

    def __init__(self, message: str = "Alert not found or access denied") -> None:
        super().__init__(message)


class PreferencesNotFound(AlertServiceError):
    def __init__(self, message: str = "User preferences not found") -> None:
        super().__init__(message)


class InvalidToken(AlertServiceError):
    def __init__(self, message: str = "Invalid or unknown token") -> None:
        super().__init__(message)


class CatalogUnavailable(AlertServiceError):
    """The product catalog could not be reached or answered with an error."""


class AlreadyVerified(AlertServiceError):
    def __init__(self, message: str = "Alert is already verified") -> None:
        super().__init__(message)


class EmailDeliveryFailed(AlertServiceError):
    """The e-mail the caller asked for could not be handed to the mail provider."""
