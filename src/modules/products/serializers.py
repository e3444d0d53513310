"""Product DRF serializers for API output.

Input validation lives in the pydantic DTOs (``dtos.py``); these
serializers only shape the records the views return.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
