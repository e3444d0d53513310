"""Order DRF serializers for API output.

Input validation lives in the pydantic DTOs (``dtos.py``); these
serializers shape the persisted order and its line snapshots.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for a line-item snapshot."""

    class Meta:
        model = OrderItem
        fields = [
            "product_id",
            "name",
            "price_at_order",
            "quantity",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with their nested line items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_name",
            "items",
            "total_price",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
