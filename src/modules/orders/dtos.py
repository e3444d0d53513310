"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: a single requested line (product + quantity).
- ``CreateOrderDTO``: an order placement request.
- ``OrderLineSnapshot``: the frozen name/price copy the engine hands
  to the repository for each line.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order line in a placement request.

    The client sends ``product_id`` and ``quantity``; name and price are
    resolved by the Service Layer from the catalog.  ``quantity`` must be
    a real integer: booleans and numeric strings are rejected.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: Annotated[int, Field(strict=True)]

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates:
    - ``customer_name`` is non-empty (surrounding whitespace removed).
    - ``items`` contains at least one line.

    The same product may appear on several lines; the engine checks
    stock cumulatively across them.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    items: List[CreateOrderItemDTO]

    @field_validator("customer_name")
    @classmethod
    def customer_name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Customer name must not be empty.")
        return v.strip()

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


# ---------------------------------------------------------------------------
# Internal DTOs
# ---------------------------------------------------------------------------


class OrderLineSnapshot(BaseModel):
    """Product data frozen at placement time for one order line."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    name: str
    price_at_order: Decimal
    quantity: int
