"""
Egress lifecycle.

    PENDING -> COMPLETED
    PENDING -> CANCELLED

Both targets are terminal; edits and deletes are only allowed while
PENDING.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Count, Sum
from django.utils import timezone

from apps.common.exceptions import ConcurrentModification
from apps.common.money import money, ZERO
from apps.egresses.models import Egress, EgressStatus, Currency
from .exceptions import (
    EgressNotFound,
    EgressCannotBeUpdated,
    EgressCannotBeDeleted,
    InvalidEgressData,
)

logger = logging.getLogger(__name__)


def next_egress_number(*, now: Optional[datetime] = None) -> str:
    """``EGR-{yyyyMMdd}-{seq3}`` for the current business day."""
    local = (now or timezone.now()).astimezone(ZoneInfo(settings.BUSINESS_TIME_ZONE))
    prefix = f"EGR-{local:%Y%m%d}"
    last = (
        Egress.objects.filter(egress_number__startswith=f"{prefix}-")
        .order_by('-egress_number')
        .values_list('egress_number', flat=True)
        .first()
    )
    sequence = int(last.rsplit('-', 1)[-1]) + 1 if last else 1
    return f"{prefix}-{sequence:03d}"


def _check_amount(amount) -> Decimal:
    if amount is None or money(amount) <= ZERO:
        raise InvalidEgressData("Amount must be greater than 0")
    return money(amount)


def _lock_egress(egress_id: UUID) -> Egress:
    try:
        return Egress.objects.alive().select_for_update().get(id=egress_id)
    except Egress.DoesNotExist:
        raise EgressNotFound()


@transaction.atomic
def create_egress(
    *,
    actor,
    concept: str,
    amount,
    type: str,
    currency: str = Currency.USD,
    notes: str = '',
    authorized_by: str = '',
) -> Egress:
    """
    Register a PENDING egress stamped with the acting user.

    Raises:
        InvalidEgressData: If amount <= 0
        ConcurrentModification: If another egress took the same number
    """
    amount = _check_amount(amount)
    egress_number = next_egress_number()

    try:
        with transaction.atomic():
            egress = Egress.objects.create(
                egress_number=egress_number,
                concept=concept.strip(),
                amount=amount,
                currency=currency,
                type=type,
                notes=notes,
                authorized_by=authorized_by,
                user=actor if getattr(actor, 'is_authenticated', False) else None,
            )
    except IntegrityError as e:
        logger.warning("Egress number collision", extra={'egress_number': egress_number})
        raise ConcurrentModification() from e

    logger.info(
        "Egress created",
        extra={'egress_id': str(egress.id), 'egress_number': egress_number, 'amount': str(amount)},
    )
    return egress


def get_egress(*, egress_id: UUID) -> Egress:
    try:
        return Egress.objects.alive().select_related('user').get(id=egress_id)
    except Egress.DoesNotExist:
        raise EgressNotFound()


@transaction.atomic
def update_egress(*, egress_id: UUID, actor=None, **fields) -> Egress:
    """
    Edit a PENDING egress. Status moves through complete/cancel only.

    Raises:
        EgressNotFound: Missing or deleted
        EgressCannotBeUpdated: Not PENDING
        InvalidEgressData: amount <= 0
    """
    egress = _lock_egress(egress_id)
    if egress.status != EgressStatus.PENDING:
        raise EgressCannotBeUpdated(f"Egress {egress.egress_number} is {egress.status}")

    fields.pop('status', None)
    if 'amount' in fields:
        fields['amount'] = _check_amount(fields['amount'])

    for name, value in fields.items():
        setattr(egress, name, value)
    egress.save()
    return egress


@transaction.atomic
def delete_egress(*, egress_id: UUID, actor=None) -> None:
    egress = _lock_egress(egress_id)
    if egress.status != EgressStatus.PENDING:
        raise EgressCannotBeDeleted(f"Egress {egress.egress_number} is {egress.status}")
    egress.soft_delete()
    logger.info("Egress deleted", extra={'egress_id': str(egress_id)})


def _transition(egress_id: UUID, target: str) -> Egress:
    egress = _lock_egress(egress_id)
    if egress.status != EgressStatus.PENDING:
        raise EgressCannotBeUpdated(
            f"Cannot move egress {egress.egress_number} from {egress.status} to {target}"
        )
    egress.status = target
    egress.save(update_fields=['status', 'updated_at'])
    return egress


@transaction.atomic
def complete_egress(*, egress_id: UUID, actor=None) -> Egress:
    egress = _transition(egress_id, EgressStatus.COMPLETED)
    logger.info(
        "Egress completed",
        extra={'egress_id': str(egress_id), 'amount': str(egress.amount), 'currency': egress.currency},
    )
    return egress


@transaction.atomic
def cancel_egress(*, egress_id: UUID, actor=None) -> Egress:
    egress = _transition(egress_id, EgressStatus.CANCELLED)
    logger.info("Egress cancelled", extra={'egress_id': str(egress_id)})
    return egress


def get_statistics(*, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None) -> dict:
    """
    Totals of completed egresses per currency, and counts per status.

    Returns:
        {'by_currency': {'USD': Decimal, 'ARS': Decimal},
         'by_status': {'PENDING': int, 'COMPLETED': int, 'CANCELLED': int}}
    """
    queryset = Egress.objects.alive()
    if date_from:
        queryset = queryset.filter(created_at__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__lte=date_to)

    by_currency = {currency: ZERO for currency in Currency.values}
    totals = (
        queryset.filter(status=EgressStatus.COMPLETED)
        .values('currency')
        .annotate(total=Sum('amount'))
        .order_by()
    )
    for row in totals:
        by_currency[row['currency']] = money(row['total'])

    by_status = {status: 0 for status in EgressStatus.values}
    for row in queryset.values('status').annotate(count=Count('id')).order_by():
        by_status[row['status']] = row['count']

    return {'by_currency': by_currency, 'by_status': by_status}
