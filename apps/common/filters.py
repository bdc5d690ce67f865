"""
Query-parameter filters shared by the list endpoints.

``from``/``to`` accept either a bare date (``2025-09-01``), widened to the
start or end of that UTC day, or a full ISO datetime.
"""
from datetime import datetime, time, timezone as dt_timezone

from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers


class DayBoundaryField(serializers.Field):
    """Parse a date or datetime into an aware datetime."""

    default_error_messages = {
        'invalid': 'Use YYYY-MM-DD or an ISO 8601 datetime.',
    }

    def __init__(self, *, boundary='start', **kwargs):
        self.boundary = boundary
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = str(data).strip()

        if 'T' not in value and ' ' not in value:
            day = parse_date(value) if value else None
            if day is None:
                self.fail('invalid')
            clock = time.min if self.boundary == 'start' else time.max
            return datetime.combine(day, clock, tzinfo=dt_timezone.utc)

        try:
            moment = parse_datetime(value)
        except ValueError:
            moment = None
        if moment is None:
            self.fail('invalid')
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment, dt_timezone.utc)
        return moment

    def to_representation(self, value):
        return value.isoformat()


class DateRangeFilterSerializer(serializers.Serializer):
    """
    Validate ``search``/``from``/``to`` query parameters.

    ``from`` and ``to`` are Python keywords, so they are added in
    get_fields() instead of being declared as attributes.
    """

    search = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def get_fields(self):
        fields = super().get_fields()
        fields['from'] = DayBoundaryField(boundary='start', required=False)
        fields['to'] = DayBoundaryField(boundary='end', required=False)
        return fields

    def validate(self, attrs):
        start, end = attrs.get('from'), attrs.get('to')
        if start and end and start > end:
            raise serializers.ValidationError({'to': '"to" must not be earlier than "from".'})
        return attrs


def apply_date_range(queryset, params, field='created_at'):
    """Filter ``queryset`` by validated ``from``/``to`` params on ``field``."""
    if params.get('from'):
        queryset = queryset.filter(**{f'{field}__gte': params['from']})
    if params.get('to'):
        queryset = queryset.filter(**{f'{field}__lte': params['to']})
    return queryset


def apply_search(queryset, term, fields):
    """Case-insensitive OR search of ``term`` across ``fields``."""
    if not term:
        return queryset
    condition = Q()
    for field in fields:
        condition |= Q(**{f'{field}__icontains': term})
    return queryset.filter(condition)
