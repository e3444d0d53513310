"""Unit tests for ProductService.

Covers:
- create_product: happy path, duplicate name, insert race.
- update_product: happy path, not found, rename onto an existing name.
- get_product / list_products / delete_product.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def service(mock_repo):
    return ProductService(repository=mock_repo)


def _make_product(**overrides) -> Product:
    defaults = {
        "name": "Widget",
        "price": Decimal("19.99"),
        "stock": 10,
    }
    defaults.update(overrides)
    product = Product(**defaults)
    product.save()
    return product


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_success(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        mock_repo.save.side_effect = lambda p: p

        dto = CreateProductDTO(name="Widget", price=Decimal("19.99"), stock=5)
        product = service.create_product(dto)

        assert product.name == "Widget"
        assert product.price == Decimal("19.99")
        assert product.stock == 5
        mock_repo.save.assert_called_once()

    def test_duplicate_name_raises(self, service, mock_repo):
        mock_repo.get_by_name.return_value = _make_product()

        dto = CreateProductDTO(name="Widget", price=Decimal("10.00"), stock=1)
        with pytest.raises(ProductAlreadyExists, match="already exists"):
            service.create_product(dto)

        mock_repo.save.assert_not_called()

    def test_insert_race_reported_as_duplicate(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        mock_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")

        dto = CreateProductDTO(name="Widget", price=Decimal("10.00"), stock=1)
        with pytest.raises(ProductAlreadyExists):
            service.create_product(dto)


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_success(self, service, mock_repo):
        existing = _make_product()
        mock_repo.get_for_update.return_value = existing
        mock_repo.save.side_effect = lambda p: p

        product = service.update_product(
            str(existing.id), UpdateProductDTO(price=Decimal("5.00"))
        )

        assert product.price == Decimal("5.00")
        assert product.name == "Widget"
        assert product.stock == 10

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_for_update.return_value = None

        with pytest.raises(ProductNotFound):
            service.update_product("missing", UpdateProductDTO(stock=1))

    def test_rename_onto_existing_name_raises(self, service, mock_repo):
        existing = _make_product()
        other = _make_product(name="Gadget")
        mock_repo.get_for_update.return_value = existing
        mock_repo.get_by_name.return_value = other

        with pytest.raises(ProductAlreadyExists, match="Gadget"):
            service.update_product(str(existing.id), UpdateProductDTO(name="Gadget"))

        mock_repo.save.assert_not_called()

    def test_keeping_same_name_is_not_a_duplicate(self, service, mock_repo):
        existing = _make_product()
        mock_repo.get_for_update.return_value = existing
        mock_repo.save.side_effect = lambda p: p

        product = service.update_product(
            str(existing.id), UpdateProductDTO(name="Widget", stock=3)
        )

        assert product.stock == 3
        mock_repo.get_by_name.assert_not_called()


# ===========================================================================
# queries / delete
# ===========================================================================


class TestGetProduct:
    def test_success(self, service, mock_repo):
        existing = _make_product()
        mock_repo.get_by_id.return_value = existing
        assert service.get_product(str(existing.id)) is existing

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None
        with pytest.raises(ProductNotFound):
            service.get_product("missing")


class TestListProducts:
    def test_delegates_filters(self, service, mock_repo):
        mock_repo.list.return_value = []
        assert service.list_products({"in_stock": "true"}) == []
        mock_repo.list.assert_called_once_with({"in_stock": "true"})


class TestDeleteProduct:
    def test_returns_removed_product(self, service, mock_repo):
        existing = _make_product()
        mock_repo.delete.return_value = existing
        assert service.delete_product(str(existing.id)) is existing

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.delete.return_value = None
        with pytest.raises(ProductNotFound):
            service.delete_product("missing")
