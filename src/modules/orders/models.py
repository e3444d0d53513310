"""Order and OrderItem models.

Rules implemented:
- An order is created ``pending``; ``completed`` and ``cancelled`` are
  terminal (see ``constants.VALID_TRANSITIONS``).
- ``OrderItem`` is a **snapshot**: ``name`` and ``price_at_order`` are
  copied from the product when the order is placed and never change.
- ``OrderItem.product_id`` is a plain UUID, not a foreign key: the
  product may be deleted later and the order history must survive it.
- ``Order.total_price`` always equals ``compute_total(items)``; it is
  computed by the repository right before the order is persisted.
- Orders are never deleted.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Protocol

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus


class PricedLine(Protocol):
    price_at_order: Decimal
    quantity: int


def compute_total(items: Iterable[PricedLine]) -> Decimal:
    """Sum ``price_at_order * quantity`` over the given lines."""
    return sum(
        (Decimal(str(item.price_at_order)) * item.quantity for item in items),
        Decimal("0.00"),
    )


class Order(BaseModel):
    """Order aggregate root."""

    customer_name: models.CharField = models.CharField(max_length=255, db_index=True)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_price: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order can no longer change status."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def __str__(self) -> str:
        return f"Order {self.id} for {self.customer_name} ({self.status})"


class OrderItem(BaseModel):
    """Line-item snapshot embedded in an order.

    ``position`` keeps the lines in the order the customer listed them.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField()
    product_id: models.UUIDField = models.UUIDField(db_index=True)
    name: models.CharField = models.CharField(max_length=255)
    price_at_order: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "position"],
                name="order_items_order_position_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity} @ {self.price_at_order}"
