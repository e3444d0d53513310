"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is persisted atomically; when the
caller already holds a transaction they join it as a savepoint.

Concurrency control on status updates uses ``select_for_update()``
to prevent two requests from cancelling the same order twice.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.dtos import OrderLineSnapshot
from modules.orders.filters import OrderFilter
from modules.orders.models import Order, OrderItem, compute_total
from modules.orders.repositories.interfaces import IOrderRepository


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(
        self,
        customer_name: str,
        items: Sequence[OrderLineSnapshot],
        status: str,
    ) -> Order:
        """Create an order with its line snapshots atomically."""
        order = Order(
            customer_name=customer_name,
            status=status,
            total_price=compute_total(items),
        )
        order.save()

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    position=position,
                    product_id=line.product_id,
                    name=line.name,
                    price_at_order=line.price_at_order,
                    quantity=line.quantity,
                )
                for position, line in enumerate(items)
            ]
        )

        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Eager-loads items so the caller can iterate over them while the
        row is locked.  Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders, newest first.

        ``filters`` holds raw query parameters understood by
        ``OrderFilter`` (``status``, ``customer_name``, ``start_date``,
        ``end_date``).
        """
        queryset = Order.objects.prefetch_related("items").order_by(
            "-created_at", "-id"
        )
        if filters:
            queryset = OrderFilter(filters, queryset=queryset).qs
        return list(queryset)

    def list_by_customer(self, customer_name: str) -> List[Order]:
        return list(
            Order.objects.prefetch_related("items")
            .filter(customer_name=customer_name)
            .order_by("-created_at", "-id")
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, id: str, new_status: str) -> Optional[Order]:
        order = self.get_for_update(id)
        if not order:
            return None

        order.status = new_status
        order.save(update_fields=["status"])
        return order
