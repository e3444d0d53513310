"""Unit tests for BaseModel, exercised through the Product table."""

from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.products.models import Product

pytestmark = pytest.mark.unit


def _create(name="Widget") -> Product:
    return Product.objects.create(name=name, price=Decimal("1.00"), stock=1)


class TestBaseModel:
    """Tests for UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        obj = _create()
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_time_ordered(self):
        """UUIDv7 encodes timestamp, so ascending id is a stable lock order."""
        a = _create("first")
        b = _create("second")
        assert a.id < b.id

    def test_id_is_not_editable(self):
        assert Product._meta.get_field("id").editable is False

    def test_timestamps_set_on_create(self):
        obj = _create()
        assert obj.created_at is not None
        assert obj.updated_at is not None

    def test_updated_at_changes_on_save(self):
        with freeze_time("2025-06-15 12:00:00") as frozen:
            obj = _create()
            original_created = obj.created_at
            original_updated = obj.updated_at

            frozen.tick(timedelta(minutes=5))
            obj.stock = 2
            obj.save()
            obj.refresh_from_db()

        assert obj.updated_at == original_updated + timedelta(minutes=5)
        assert obj.created_at == original_created

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        with freeze_time("2025-06-15 12:00:00") as frozen:
            obj = _create()
            original_updated = obj.updated_at

            frozen.tick(timedelta(seconds=30))
            obj.stock = 9
            obj.save(update_fields=["stock"])
            obj.refresh_from_db()

        assert obj.stock == 9
        assert obj.updated_at > original_updated
