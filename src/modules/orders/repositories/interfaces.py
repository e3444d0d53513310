"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the order engine
needs: creation of an order together with its line snapshots, look-up
by customer and status updates on a locked row.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import OrderLineSnapshot
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem snapshots; they are
    written together with the order row.
    """

    @abstractmethod
    def create(
        self,
        customer_name: str,
        items: Sequence[OrderLineSnapshot],
        status: str,
    ) -> Order:
        """Create an order with its line snapshots.

        ``total_price`` is derived from ``items``, never passed in.
        """

    @abstractmethod
    def list_by_customer(self, customer_name: str) -> List[Order]:
        """Orders placed under exactly ``customer_name``, newest first."""

    @abstractmethod
    def update_status(self, id: str, new_status: str) -> Optional[Order]:
        """Set the status of an order, ``None`` when the order is absent."""
