from decimal import Decimal

from rest_framework import serializers

from apps.common.filters import DateRangeFilterSerializer
from .models import Product, ProductCategory, ProductStatus


class ProductSerializer(serializers.ModelSerializer):
    """Full product representation; status and margin are derived."""

    barcode = serializers.CharField(max_length=64)

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'barcode',
            'category',
            'price',
            'cost_price',
            'profit_margin',
            'stock',
            'unit_of_measure',
            'image',
            'description',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'profit_margin', 'status', 'created_at', 'updated_at']
        validators = []


class ProductUpdateSerializer(serializers.ModelSerializer):
    barcode = serializers.CharField(max_length=64, required=False)

    class Meta:
        model = Product
        fields = [
            'name',
            'barcode',
            'category',
            'price',
            'cost_price',
            'stock',
            'unit_of_measure',
            'image',
            'description',
        ]
        extra_kwargs = {field: {'required': False} for field in fields}
        validators = []


class StockAdjustmentSerializer(serializers.Serializer):
    """Body for the stock add/subtract endpoints."""

    quantity = serializers.IntegerField(min_value=1)


class ProductFilterSerializer(DateRangeFilterSerializer):
    """
    Validate query parameters for product listing.

    Query Parameters:
        search (str): Match against name, barcode or description
        category (str): Filter by category
        status (str): Filter by derived status
        from / to: created_at range
    """

    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)
    status = serializers.ChoiceField(choices=ProductStatus.choices, required=False)


class ProductMinimalSerializer(serializers.ModelSerializer):
    """Minimal product info for nested serialization."""

    class Meta:
        model = Product
        fields = ['id', 'name', 'barcode', 'price']
        read_only_fields = fields
