"""Product service layer (Use Cases).

Orchestrates catalog rules, delegating persistence to the injected
``IProductRepository``.

Rules enforced here:
- Product names are unique (exact match), on create and on rename.
- Price and stock are non-negative (validated by the DTOs).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for catalog use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing the unique-name rule.

        Raises:
            ProductAlreadyExists: if the name is already taken.
        """
        log = logger.bind(name=dto.name)

        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists(_duplicate_message(dto.name))

        product = Product(name=dto.name, price=dto.price, stock=dto.stock)
        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            # Lost a race against a concurrent insert of the same name.
            log.warning("product.duplicate_name", race=True)
            raise ProductAlreadyExists(_duplicate_message(dto.name)) from exc

        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if renamed onto another product's name.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=str(product.id))
        changes = dto.changes()

        new_name = changes.get("name")
        if new_name is not None and new_name != product.name:
            clash = self._repo.get_by_name(new_name)
            if clash and clash.id != product.id:
                log.warning("product.duplicate_name", name=new_name)
                raise ProductAlreadyExists(_duplicate_message(new_name))

        for field, value in changes.items():
            setattr(product, field, value)

        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            raise ProductAlreadyExists(_duplicate_message(product.name)) from exc

        log.info("product.updated", fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> Product:
        """Delete a product and return the removed record.

        Orders that reference the product keep their snapshot; the
        dangling ``product_id`` only matters if such an order is later
        cancelled.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.delete(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(product.id))
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Return a list of products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product


def _duplicate_message(name: str) -> str:
    return f"A product with the name '{name}' already exists."
