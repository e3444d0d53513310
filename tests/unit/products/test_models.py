"""Unit tests for the Product model.

Covers:
- Name trimming on save and full_clean.
- Name uniqueness constraint.
- Non-negative price and stock (application + DB constraint).
- __str__ representation.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.products.models import Product

pytestmark = pytest.mark.unit


def _build(**overrides) -> Product:
    defaults = {"name": "Widget", "price": Decimal("29.90"), "stock": 100}
    defaults.update(overrides)
    return Product(**defaults)


class TestNormalisation:
    def test_name_trimmed_on_save(self):
        product = _build(name="  Widget  ")
        product.save()
        product.refresh_from_db()
        assert product.name == "Widget"

    def test_name_trimmed_on_full_clean(self):
        product = _build(name=" Widget ")
        product.full_clean()
        assert product.name == "Widget"

    def test_blank_name_rejected_by_clean(self):
        with pytest.raises(ValidationError):
            _build(name="   ").full_clean()


class TestConstraints:
    def test_duplicate_name_rejected_by_database(self):
        _build().save()
        with pytest.raises(IntegrityError), transaction.atomic():
            _build(price=Decimal("1.00")).save()

    def test_zero_price_allowed(self):
        product = _build(price=Decimal("0"))
        product.full_clean()
        product.save()
        assert Product.objects.get(id=product.id).price == Decimal("0.00")

    def test_negative_price_rejected_by_clean(self):
        with pytest.raises(ValidationError):
            _build(price=Decimal("-0.01")).full_clean()

    def test_negative_price_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            _build(price=Decimal("-1.00")).save()

    def test_negative_stock_rejected_by_clean(self):
        with pytest.raises(ValidationError):
            _build(stock=-1).full_clean()

    def test_negative_stock_rejected_by_database(self):
        product = _build(stock=1)
        product.save()
        with pytest.raises(IntegrityError), transaction.atomic():
            Product.objects.filter(id=product.id).update(stock=-1)

    def test_stock_defaults_to_zero(self):
        product = Product.objects.create(name="Bare", price=Decimal("1.00"))
        assert product.stock == 0


def test_str():
    assert str(_build(name="Widget", stock=3)) == "Widget (3 in stock)"
