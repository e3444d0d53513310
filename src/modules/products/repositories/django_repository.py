"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing record into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction

from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _parse_ids(ids: Iterable[UUID | str]) -> List[UUID]:
    """Drop ids that cannot name a product instead of failing the whole query."""
    parsed = set()
    for value in ids:
        try:
            parsed.add(value if isinstance(value, UUID) else UUID(str(value)))
        except ValueError:
            continue
    return sorted(parsed)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE)."""
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many(
        self, ids: Iterable[UUID | str], for_update: bool = False
    ) -> Dict[UUID, Product]:
        wanted = _parse_ids(ids)
        if not wanted:
            return {}
        queryset = Product.objects.filter(id__in=wanted).order_by("id")
        if for_update:
            queryset = queryset.select_for_update()
        products = {product.id: product for product in queryset}
        logger.debug(
            "product.bulk_loaded",
            requested=len(wanted),
            found=len(products),
            locked=for_update,
        )
        return products

    def get_by_name(self, name: str) -> Optional[Product]:
        return Product.objects.filter(name=name.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products, oldest first.

        ``filters`` holds raw query parameters understood by
        ``ProductFilter`` (``name``, ``min_price``, ``max_price``,
        ``in_stock``); unknown or malformed values are ignored.
        """
        queryset = Product.objects.all()
        if filters:
            queryset = ProductFilter(filters, queryset=queryset).qs
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> Optional[Product]:
        """Delete a product by ID.

        The queryset delete leaves the loaded instance (and its ``id``)
        intact so the caller can still render the removed record.
        """
        product = self.get_by_id(id)
        if not product:
            return None
        Product.objects.filter(id=product.id).delete()
        return product
