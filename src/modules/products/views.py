"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; anything else propagates.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import format_validation_error
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

REQUIRED_CREATE_FIELDS = ("name", "price", "stock")


def _not_found() -> Response:
    return Response(
        {"message": "Product not found"},
        status=status.HTTP_404_NOT_FOUND,
    )


def _bad_request(message: str) -> Response:
    return Response({"message": message}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/products/

        Optional query parameters: ``name``, ``min_price``, ``max_price``,
        ``in_stock``.
        """
        products = self._service.list_products(request.query_params.dict())
        return Response(ProductSerializer(products, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/products/{pk}/"""
        if pk is None:
            return _not_found()
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/products/"""
        data = request.data
        if not isinstance(data, dict) or any(
            data.get(field) in (None, "") for field in REQUIRED_CREATE_FIELDS
        ):
            return _bad_request("Please enter all fields: name, price, and stock")

        try:
            dto = CreateProductDTO(
                name=data["name"],
                price=data["price"],
                stock=data["stock"],
            )
        except PydanticValidationError as exc:
            return _bad_request(format_validation_error(exc))

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return _bad_request(str(exc))

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/products/{pk}/

        Only the supplied fields (``name``, ``price``, ``stock``) change.
        """
        data = request.data
        if not isinstance(data, dict):
            return _bad_request("Request body must be a JSON object.")

        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                stock=data.get("stock"),
            )
        except PydanticValidationError as exc:
            return _bad_request(format_validation_error(exc))

        if pk is None:
            return _not_found()
        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        except ProductAlreadyExists as exc:
            return _bad_request(str(exc))

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/products/{pk}/"""
        if pk is None:
            return _not_found()
        try:
            product = self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(
            {
                "message": "Product deleted successfully",
                "deleted_product": ProductSerializer(product).data,
            }
        )
