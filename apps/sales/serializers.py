from decimal import Decimal

from rest_framework import serializers

from apps.common.filters import DateRangeFilterSerializer
from .models import Sale, SaleItem, SaleStatus, PaymentMethod


PERCENT_KWARGS = {
    'max_digits': 5,
    'decimal_places': 2,
    'min_value': Decimal('0'),
    'max_value': Decimal('100'),
}


# =============================================================================
# Output
# =============================================================================

class SaleItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = SaleItem
        fields = ['id', 'product_id', 'product_name', 'quantity', 'unit_price', 'subtotal']
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """Sale with its line items."""

    items = SaleItemSerializer(many=True, read_only=True)
    client_id = serializers.UUIDField(read_only=True, allow_null=True)
    prepaid_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Sale
        fields = [
            'id',
            'sale_number',
            'client_id',
            'customer_name',
            'customer_email',
            'customer_phone',
            'items',
            'subtotal',
            'tax',
            'discount',
            'prepaid_used',
            'fifo_consumed',
            'prepaid_id',
            'total',
            'payment_method',
            'status',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SaleSummarySerializer(serializers.ModelSerializer):
    """Compact row used by the daily report."""

    class Meta:
        model = Sale
        fields = ['id', 'sale_number', 'customer_name', 'total', 'payment_method', 'status', 'created_at']
        read_only_fields = fields


class DailySummarySerializer(serializers.Serializer):
    total_sales = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    by_payment_method = serializers.DictField(
        child=serializers.DecimalField(max_digits=14, decimal_places=2)
    )
    by_status = serializers.DictField(child=serializers.IntegerField())


class DailySalesSerializer(serializers.Serializer):
    date = serializers.DateField()
    timezone = serializers.CharField()
    sales = SaleSummarySerializer(many=True)
    summary = DailySummarySerializer()


# =============================================================================
# Input
# =============================================================================

class SaleItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class SaleCreateSerializer(serializers.Serializer):
    """
    Body for POST /api/sales/.

    Leave ``prepaid_used`` out to let a CASH sale of a client draw on
    its pending prepaids automatically.
    """

    items = SaleItemInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    client_id = serializers.UUIDField(required=False, allow_null=True)
    tax = serializers.DecimalField(required=False, default=Decimal('0'), **PERCENT_KWARGS)
    discount = serializers.DecimalField(required=False, default=Decimal('0'), **PERCENT_KWARGS)
    prepaid_used = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    prepaid_id = serializers.UUIDField(required=False, allow_null=True)
    consumed_prepaid = serializers.BooleanField(required=False, default=False)
    customer_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    customer_email = serializers.EmailField(max_length=255, required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class SaleUpdateSerializer(serializers.Serializer):
    """Body for PATCH /api/sales/{id}/. Every field is optional."""

    status = serializers.ChoiceField(choices=SaleStatus.choices, required=False)
    items = SaleItemInputSerializer(many=True, allow_empty=False, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    tax = serializers.DecimalField(required=False, **PERCENT_KWARGS)
    discount = serializers.DecimalField(required=False, **PERCENT_KWARGS)
    prepaid_used = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True
    )
    prepaid_id = serializers.UUIDField(required=False, allow_null=True)
    consumed_prepaid = serializers.BooleanField(required=False)
    customer_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    customer_email = serializers.EmailField(max_length=255, required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class SaleFilterSerializer(DateRangeFilterSerializer):
    """
    Validate query parameters for sale listing.

    Query Parameters:
        search (str): Match against sale number, customer name or email
        status (str): PENDING, COMPLETED or CANCELLED
        payment_method (str): CASH, CARD or TRANSFER
        client (uuid): Sales of one client
        from / to: created_at range
    """

    status = serializers.ChoiceField(choices=SaleStatus.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    client = serializers.UUIDField(required=False)


class DailySalesQuerySerializer(serializers.Serializer):
    """``date`` and ``timezone`` are checked by the service."""

    date = serializers.CharField(required=False, allow_blank=True, max_length=10)
    timezone = serializers.CharField(required=False, allow_blank=True, max_length=64)
