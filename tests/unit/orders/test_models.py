"""Unit tests for the order model helpers: totals and the state machine."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import pytest

from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus
from modules.orders.models import Order, compute_total

pytestmark = pytest.mark.unit


@dataclass
class Line:
    price_at_order: Decimal
    quantity: int


class TestComputeTotal:
    def test_sums_price_times_quantity(self):
        lines = [Line(Decimal("10.00"), 2), Line(Decimal("2.50"), 3)]
        assert compute_total(lines) == Decimal("27.50")

    def test_empty_is_zero(self):
        assert compute_total([]) == Decimal("0.00")

    def test_no_float_drift(self):
        lines = [Line(Decimal("0.10"), 1) for _ in range(3)]
        assert compute_total(lines) == Decimal("0.30")


class TestStateMachine:
    @pytest.mark.parametrize(
        "new_status",
        [OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED],
    )
    def test_pending_can_move_anywhere(self, new_status):
        assert Order(status=OrderStatus.PENDING).can_transition_to(new_status)

    @pytest.mark.parametrize("current", sorted(TERMINAL_STATES))
    @pytest.mark.parametrize(
        "new_status",
        [OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED],
    )
    def test_terminal_states_are_frozen(self, current, new_status):
        order = Order(status=current)
        assert order.is_terminal
        assert not order.can_transition_to(new_status)

    def test_every_status_has_a_transition_entry(self):
        assert set(VALID_TRANSITIONS) == set(OrderStatus.values)

    def test_new_order_is_pending(self):
        assert Order(customer_name="Alice").status == OrderStatus.PENDING
