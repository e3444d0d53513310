"""Order service layer (Use Cases).

Orchestrates order placement and status changes against the shared
stock pool.  Every write operation runs inside one
``transaction.atomic`` block.  The service defines the unit-of-work
boundary, so an exception anywhere leaves catalog and orders untouched.

Rules enforced:
- Every product of an order is locked (SELECT FOR UPDATE, ascending id
  order to avoid deadlocks) before its stock is checked.
- Stock never goes negative; a short line aborts the whole order.
- Name and price are snapshotted into the order at placement time.
- ``completed`` and ``cancelled`` are terminal, so stock is restored at
  most once per order.
- Cancelling an order whose product was deleted fails instead of
  silently dropping the restored units.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog

from django.db import DatabaseError, transaction

from modules.orders.constants import OrderStatus
from modules.orders.dtos import OrderLineSnapshot
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    InvalidStatusTransition,
    OrderNotFound,
    OrderStorageFailure,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order, reserving stock for every line atomically.

        Steps:
        1. Lock every referenced product (sorted by id).
        2. Walk the lines in request order, checking existence and the
           stock still left after earlier lines of the same request.
        3. Snapshot name and price, decrement stock.
        4. Persist the order as ``pending`` with the computed total.

        Raises:
            ProductNotFound: a line references a missing product.
            InsufficientStock: a line asks for more than is left.
            OrderStorageFailure: the database failed mid-transaction.
        """
        log = logger.bind(customer_name=dto.customer_name, line_count=len(dto.items))
        log.info("order.placement_started")

        try:
            with transaction.atomic():
                order = self._place_order(dto, log)
        except DatabaseError as exc:
            log.error("order.placement_storage_failure", error=str(exc))
            raise OrderStorageFailure(
                "The order could not be saved, no changes were made."
            ) from exc

        log.info(
            "order.placed",
            order_id=str(order.id),
            total_price=str(order.total_price),
        )
        return order

    def update_status(self, order_id: UUID | str, new_status: str) -> Order:
        """Move an order to *new_status*, restoring stock on cancellation.

        Raises:
            InvalidOrderStatus: *new_status* is not a recognized status.
            OrderNotFound: the order does not exist.
            InvalidStatusTransition: the order is already terminal.
            ProductNotFound: a cancelled line's product no longer exists.
            OrderStorageFailure: the database failed mid-transaction.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(
                "Invalid status. Must be one of: " + ", ".join(OrderStatus.values)
            )

        log = logger.bind(order_id=str(order_id), new_status=new_status)

        try:
            with transaction.atomic():
                order = self._update_status(str(order_id), new_status, log)
        except DatabaseError as exc:
            log.error("order.status_storage_failure", error=str(exc))
            raise OrderStorageFailure(
                "The order status could not be saved, no changes were made."
            ) from exc

        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound("Order not found")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return all orders, newest first, optionally filtered."""
        return self._order_repo.list(filters)

    def list_orders_by_customer(self, customer_name: str) -> List[Order]:
        """Return the orders of one customer, newest first (may be empty)."""
        return self._order_repo.list_by_customer(customer_name)

    # ------------------------------------------------------------------
    # Transaction bodies
    # ------------------------------------------------------------------

    def _place_order(self, dto: CreateOrderDTO, log: Any) -> Order:
        products = self._lock_products(item.product_id for item in dto.items)

        remaining = {product_id: p.stock for product_id, p in products.items()}
        snapshots: List[OrderLineSnapshot] = []

        for item in dto.items:
            product = products.get(item.product_id)
            if product is None:
                log.warning("order.product_missing", product_id=str(item.product_id))
                raise ProductNotFound(item.product_id)

            available = remaining[product.id]
            if available < item.quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=str(product.id),
                    available=available,
                    requested=item.quantity,
                )
                raise InsufficientStock(product.name, available, item.quantity)

            remaining[product.id] = available - item.quantity
            snapshots.append(
                OrderLineSnapshot(
                    product_id=product.id,
                    name=product.name,
                    price_at_order=product.price,
                    quantity=item.quantity,
                )
            )

        # Every line passed: apply the decrements.
        for product_id, stock in remaining.items():
            product = products[product_id]
            if stock == product.stock:
                continue
            reserved = product.stock - stock
            product.stock = stock
            self._product_repo.save(product)
            log.info(
                "order.stock_reserved",
                product_id=str(product_id),
                quantity=reserved,
                remaining=stock,
            )

        return self._order_repo.create(
            customer_name=dto.customer_name,
            items=snapshots,
            status=OrderStatus.PENDING,
        )

    def _update_status(self, order_id: str, new_status: str, log: Any) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound("Order not found")

        log = log.bind(current_status=order.status)

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidStatusTransition(
                f"Cannot change status of a {order.status} order to {new_status}."
            )

        if new_status == OrderStatus.CANCELLED:
            self._restore_stock(order, log)

        updated = self._order_repo.update_status(str(order.id), new_status)
        log.info("order.status_updated")
        return updated

    def _restore_stock(self, order: Order, log: Any) -> None:
        quantities: Counter = Counter()
        for item in order.items.all():
            quantities[item.product_id] += item.quantity

        products = self._lock_products(quantities)
        for product_id in sorted(quantities):
            product = products.get(product_id)
            if product is None:
                log.warning("order.restore_product_missing", product_id=str(product_id))
                raise ProductNotFound(product_id)

            product.stock += quantities[product_id]
            self._product_repo.save(product)
            log.info(
                "order.stock_released",
                product_id=str(product_id),
                quantity=quantities[product_id],
                restored_stock=product.stock,
            )

    def _lock_products(self, product_ids: Iterable[UUID]) -> Dict[UUID, Product]:
        return self._product_repo.get_many(product_ids, for_update=True)
