"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; anything else propagates.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import format_validation_error
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderNotFound,
    OrderStorageFailure,
    ProductNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


def _message(message: str, code: int) -> Response:
    return Response({"message": message}, status=code)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders/

        Body: ``{"customer_name": str, "items": [{"product_id", "quantity"}]}``.
        """
        data = request.data
        if not isinstance(data, dict) or not data.get("customer_name") or not data.get(
            "items"
        ):
            return _message(
                "Please provide customer name and at least one item.",
                status.HTTP_400_BAD_REQUEST,
            )

        try:
            dto = CreateOrderDTO(
                customer_name=data["customer_name"],
                items=data["items"],
            )
        except PydanticValidationError as exc:
            return _message(format_validation_error(exc), status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.place_order(dto)
        except (ProductNotFound, InsufficientStock) as exc:
            return _message(str(exc), status.HTTP_400_BAD_REQUEST)
        except OrderStorageFailure as exc:
            return _message(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/orders/

        Newest first.  Optional query parameters: ``status``,
        ``customer_name``, ``start_date``, ``end_date``.
        """
        orders = self._service.list_orders(request.query_params.dict())
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/orders/{pk}/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return _message("Order not found", status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"customer/(?P<customer_name>[^/]+)",
    )
    def by_customer(self, request: Request, customer_name: str) -> Response:
        """GET /api/orders/customer/{customer_name}/

        Returns ``[]`` rather than 404 when the customer has no orders.
        """
        orders = self._service.list_orders_by_customer(customer_name)
        return Response(OrderSerializer(orders, many=True).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/orders/{pk}/status/

        Body: ``{"status": "pending" | "completed" | "cancelled"}``.
        Cancelling a pending order returns its units to stock.
        """
        status_value = request.data.get("status") if isinstance(request.data, dict) else None

        try:
            order = self._service.update_status(pk or "", status_value)
        except OrderNotFound:
            return _message("Order not found", status.HTTP_404_NOT_FOUND)
        except (InvalidOrderStatus, ProductNotFound) as exc:
            return _message(str(exc), status.HTTP_400_BAD_REQUEST)
        except OrderStorageFailure as exc:
            return _message(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(OrderSerializer(order).data)
