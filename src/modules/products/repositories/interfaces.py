"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
unique-name rule and by the order engine's bulk, locked reads.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from uuid import UUID

    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the catalog."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve a product by its exact name."""

    @abstractmethod
    def get_many(
        self, ids: Iterable[UUID | str], for_update: bool = False
    ) -> Dict[UUID, Product]:
        """Retrieve several products keyed by id; missing ids are absent.

        With ``for_update=True`` the rows are locked in ascending id
        order so that concurrent callers never deadlock each other.
        """

    @abstractmethod
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""

    @abstractmethod
    def delete(self, id: str) -> Optional[Product]:
        """Remove a product, returning the removed record (``None`` if absent)."""
