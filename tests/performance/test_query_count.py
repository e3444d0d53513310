"""Performance regression tests: constant query count (N+1 prevention).

Verifies that order list and retrieve endpoints execute a bounded number
of SQL queries regardless of the number of orders and lines, proving
that ``prefetch_related("items")`` is applied.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.dtos import OrderLineSnapshot
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.models import Product


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def products():
    return [
        Product.objects.create(
            name=f"Product {i}",
            price=Decimal("10.00"),
            stock=1000,
        )
        for i in range(5)
    ]


@pytest.fixture()
def orders_with_items(products):
    """Create multiple orders each with multiple items."""
    repo = OrderDjangoRepository()
    return [
        repo.create(
            customer_name=f"customer-{i % 3}",
            items=[
                OrderLineSnapshot(
                    product_id=product.id,
                    name=product.name,
                    price_at_order=product.price,
                    quantity=1,
                )
                for product in products[:3]
            ],
            status="pending",
        )
        for i in range(10)
    ]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestOrderListQueryCount:
    """Verify the order list endpoints run a constant number of queries."""

    def test_list_query_count_is_constant(
        self, api_client, orders_with_items, django_assert_max_num_queries
    ):
        """GET /api/orders/: one SELECT for orders, one for all their items."""
        with django_assert_max_num_queries(2):
            response = api_client.get("/api/orders/")

        assert response.status_code == 200
        assert len(response.json()) == 10

    def test_customer_list_query_count_is_constant(
        self, api_client, orders_with_items, django_assert_max_num_queries
    ):
        with django_assert_max_num_queries(2):
            response = api_client.get("/api/orders/customer/customer-0/")

        assert response.status_code == 200
        assert len(response.json()) == 4


class TestOrderRetrieveQueryCount:
    def test_retrieve_query_count_is_constant(
        self, api_client, orders_with_items, django_assert_max_num_queries
    ):
        order = orders_with_items[0]

        with django_assert_max_num_queries(2):
            response = api_client.get(f"/api/orders/{order.id}/")

        assert response.status_code == 200
        assert len(response.json()["items"]) == 3
