"""Daily sequential sale numbers in the business time zone."""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone

from apps.sales.models import Sale

SEQUENCE_WIDTH = 3


def sale_number_prefix(moment: datetime) -> str:
    local = moment.astimezone(ZoneInfo(settings.BUSINESS_TIME_ZONE))
    return f"V-{local:%Y}-{local:%m%d}"


def next_sale_number(*, now: Optional[datetime] = None) -> str:
    """
    Return the next ``V-{yyyy}-{MMDD}-{seq3}`` for the current local day.

    The highest existing number is found by string order, which only
    holds while the sequence fits in three digits. Deleted sales still
    count since sale_number is unique across all rows.
    """
    prefix = sale_number_prefix(now or timezone.now())
    last = (
        Sale.objects.filter(sale_number__startswith=f"{prefix}-")
        .order_by('-sale_number')
        .values_list('sale_number', flat=True)
        .first()
    )
    sequence = int(last.rsplit('-', 1)[-1]) + 1 if last else 1
    return f"{prefix}-{sequence:0{SEQUENCE_WIDTH}d}"
