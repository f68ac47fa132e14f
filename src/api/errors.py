# failures surfaced by the api client and the view models
from typing import Optional


class InventoryError(Exception):
    """Base of every failure a screen reports to the user."""


class RequestFailed(InventoryError):
    """The server was reached and rejected the request."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return self.message


class Unauthenticated(RequestFailed):
    """
    Missing or expired credential.
    Raised for a 401 from the server, or locally when no token is held.
    """

    def __init__(self, message: str = "Please log in first.") -> None:
        super().__init__(401, message)


class NetworkUnreachable(InventoryError):
    """Transport-level failure: refused connection, DNS, timeout."""


class MalformedResponse(InventoryError):
    """The response body could not be parsed into the expected records."""


class UnknownProduct(InventoryError):
    def __init__(self, product_id: str) -> None:
        super().__init__("Please select a product.")
        self.product_id = product_id


class InsufficientStock(InventoryError):
    def __init__(
        self, product_id: str, requested: int, available: Optional[int]
    ) -> None:
        available = available or 0
        super().__init__(f"Only {available} items available in stock.")
        self.product_id = product_id
        self.requested = requested
        self.available = available
