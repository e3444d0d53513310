"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class ProductNotFound(Exception):
    """A product referenced by an order line does not exist."""

    def __init__(self, product_id: object) -> None:
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found.")


class InsufficientStock(Exception):
    """A line asks for more units than the product has left."""

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product: {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class InvalidOrderStatus(Exception):
    """The requested status is not one of the recognized values."""


class InvalidStatusTransition(InvalidOrderStatus):
    """The order's current status does not allow the requested change."""


class OrderStorageFailure(Exception):
    """The database failed (lock timeout, deadlock, lost connection) mid-transaction."""
