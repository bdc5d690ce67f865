from decimal import Decimal

from rest_framework import serializers

from apps.common.filters import DateRangeFilterSerializer
from apps.common.money import money
from .models import Client, Prepaid, PrepaidStatus


# =============================================================================
# Prepaids
# =============================================================================

class PrepaidSerializer(serializers.ModelSerializer):
    class Meta:
        model = Prepaid
        fields = [
            'id',
            'client',
            'amount',
            'status',
            'consumed_at',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PrepaidInputSerializer(serializers.Serializer):
    """Credit to add to a client."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=500)


class PrepaidFilterSerializer(DateRangeFilterSerializer):
    """
    Validate query parameters for prepaid listing.

    Query Parameters:
        search (str): Match against client name or email
        status (str): PENDING or CONSUMED
        from / to: created_at range
    """

    status = serializers.ChoiceField(choices=PrepaidStatus.choices, required=False)


class PrepaidStatusQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PrepaidStatus.choices)


class ClientPrepaidTotalSerializer(serializers.Serializer):
    client_id = serializers.UUIDField()
    total_pending = serializers.DecimalField(max_digits=12, decimal_places=2)


# =============================================================================
# Clients
# =============================================================================

def _alive_prepaids(client):
    prefetched = getattr(client, 'alive_prepaids', None)
    if prefetched is not None:
        return prefetched
    return list(client.prepaids.filter(deleted_at__isnull=True).order_by('created_at'))


class ClientSerializer(serializers.ModelSerializer):
    """Client with its prepaids and the pending balance."""

    prepaids = serializers.SerializerMethodField()
    total_pending = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            'id',
            'full_name',
            'phone',
            'email',
            'cuit',
            'notes',
            'prepaids',
            'total_pending',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_prepaids(self, obj):
        return PrepaidSerializer(_alive_prepaids(obj), many=True).data

    def get_total_pending(self, obj) -> str:
        total = sum(
            (p.amount for p in _alive_prepaids(obj) if p.status == PrepaidStatus.PENDING),
            Decimal('0'),
        )
        return str(money(total))


class ClientWriteSerializer(serializers.Serializer):
    """Create/update payload. On update every field is optional."""

    full_name = serializers.CharField(min_length=2, max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=255, required=False, allow_blank=True, allow_null=True)
    cuit = serializers.CharField(max_length=13, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    prepaids = PrepaidInputSerializer(many=True, required=False)

    def validate_email(self, value):
        return value.strip().lower() if value else None
