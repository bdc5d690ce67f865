from rest_framework import serializers

from apps.common.filters import DateRangeFilterSerializer
from .models import Egress, EgressStatus, EgressType, Currency


class EgressSerializer(serializers.ModelSerializer):
    """Egress as stored; amount > 0 is enforced by the service."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    user_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Egress
        fields = [
            'id',
            'egress_number',
            'concept',
            'amount',
            'currency',
            'type',
            'status',
            'notes',
            'authorized_by',
            'user_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'egress_number', 'status', 'user_id', 'created_at', 'updated_at']
        extra_kwargs = {'concept': {'min_length': 3}}


class EgressUpdateSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    class Meta:
        model = Egress
        fields = ['concept', 'amount', 'currency', 'type', 'notes', 'authorized_by']
        extra_kwargs = {field: {'required': False} for field in fields}
        extra_kwargs['concept']['min_length'] = 3


class EgressFilterSerializer(DateRangeFilterSerializer):
    """
    Validate query parameters for egress listing.

    Query Parameters:
        search (str): Match against concept, notes or authorized_by
        status / type / currency: Exact filters
        from / to: created_at range
    """

    status = serializers.ChoiceField(choices=EgressStatus.choices, required=False)
    type = serializers.ChoiceField(choices=EgressType.choices, required=False)
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)


class EgressStatisticsSerializer(serializers.Serializer):
    by_currency = serializers.DictField(child=serializers.DecimalField(max_digits=14, decimal_places=2))
    by_status = serializers.DictField(child=serializers.IntegerField())
