"""
Prepaid ledger: per-client prepaid credit.

State machine per record:
    PENDING -> CONSUMED  (consume_by_amount_fifo, consume_specific)
    CONSUMED -> PENDING  (update_status, used for targeted restoration)

Two restoration paths exist on purpose. A sale that targeted a specific
prepaid flips that same record back with update_status(); a sale that
consumed by FIFO gets its amount back as a brand-new record via
restore(), because a FIFO consumption may have touched several records
and split one of them.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.clients.models import Client, Prepaid, PrepaidStatus
from apps.common.exceptions import InvalidInputError
from apps.common.money import money, ZERO
from .exceptions import ClientNotFound, PrepaidNotFound, PrepaidAlreadyConsumed

logger = logging.getLogger(__name__)

MIN_PREPAID_AMOUNT = Decimal('0.01')
RESTORE_NOTE = 'Restored from cancelled sale'


@transaction.atomic
def consume_by_amount_fifo(*, client_id: UUID, amount) -> Decimal:
    """
    Consume up to ``amount`` from the client's pending prepaids, oldest first.

    Records that fit entirely are marked CONSUMED. The first record larger
    than what is still needed is split: its amount shrinks in place and a
    new CONSUMED record holds the consumed part.

    Never fails on a short balance; the caller gets whatever was available.

    Args:
        client_id: Owner of the prepaids
        amount: Amount to consume

    Returns:
        Amount actually consumed (<= amount)
    """
    need = money(amount)
    if need <= ZERO:
        return ZERO

    now = timezone.now()
    consumed = ZERO

    prepaids = (
        Prepaid.objects.alive()
        .select_for_update()
        .filter(client_id=client_id, status=PrepaidStatus.PENDING)
        .order_by('created_at', 'id')
    )

    for prepaid in prepaids:
        remaining = need - consumed
        if remaining <= ZERO:
            break

        if prepaid.amount <= remaining:
            prepaid.status = PrepaidStatus.CONSUMED
            prepaid.consumed_at = now
            prepaid.save(update_fields=['status', 'consumed_at', 'updated_at'])
            consumed += prepaid.amount
        else:
            prepaid.amount = money(prepaid.amount - remaining)
            prepaid.save(update_fields=['amount', 'updated_at'])
            Prepaid.objects.create(
                client_id=client_id,
                amount=remaining,
                status=PrepaidStatus.CONSUMED,
                consumed_at=now,
                notes=f"Consumed from prepaid {prepaid.id}",
            )
            consumed += remaining

    if consumed < need:
        logger.warning(
            "Prepaid balance short of requested amount",
            extra={'client_id': str(client_id), 'requested': str(need), 'consumed': str(consumed)},
        )
    else:
        logger.info(
            "Prepaid consumed by FIFO",
            extra={'client_id': str(client_id), 'consumed': str(consumed)},
        )
    return consumed


@transaction.atomic
def consume_specific(*, prepaid_id: UUID, amount=None) -> Decimal:
    """
    Consume one prepaid in full.

    Targeted consumption is all-or-nothing: ``amount`` is accepted for
    call-site symmetry but ignored; the entire record is consumed.

    Returns:
        The prepaid's full amount

    Raises:
        PrepaidNotFound: If missing or soft-deleted
        PrepaidAlreadyConsumed: If not PENDING
    """
    try:
        prepaid = Prepaid.objects.alive().select_for_update().get(id=prepaid_id)
    except Prepaid.DoesNotExist:
        raise PrepaidNotFound()

    if prepaid.status != PrepaidStatus.PENDING:
        raise PrepaidAlreadyConsumed()

    prepaid.status = PrepaidStatus.CONSUMED
    prepaid.consumed_at = timezone.now()
    prepaid.save(update_fields=['status', 'consumed_at', 'updated_at'])

    logger.info(
        "Prepaid consumed",
        extra={'prepaid_id': str(prepaid_id), 'amount': str(prepaid.amount)},
    )
    return prepaid.amount


@transaction.atomic
def restore(*, client_id: UUID, amount, notes: Optional[str] = None) -> Optional[Prepaid]:
    """
    Give credit back as a new PENDING record.

    Restoration is additive: earlier splits are not undone.

    Returns:
        The new Prepaid, or None when amount <= 0
    """
    amount = money(amount)
    if amount <= ZERO:
        return None

    prepaid = Prepaid.objects.create(
        client_id=client_id,
        amount=amount,
        status=PrepaidStatus.PENDING,
        notes=notes or RESTORE_NOTE,
    )
    logger.info(
        "Prepaid restored",
        extra={'client_id': str(client_id), 'prepaid_id': str(prepaid.id), 'amount': str(amount)},
    )
    return prepaid


@transaction.atomic
def update_status(*, prepaid_id: UUID, status: str) -> Prepaid:
    """
    Move a prepaid between PENDING and CONSUMED in place.

    Soft-deleted records are still reachable here so a sale can be
    reversed after its client was deleted.

    Raises:
        PrepaidNotFound: If the id does not exist
        InvalidInputError: If status is not a PrepaidStatus
    """
    if status not in PrepaidStatus.values:
        raise InvalidInputError(f"Unknown prepaid status: {status}")

    try:
        prepaid = Prepaid.objects.select_for_update().get(id=prepaid_id)
    except Prepaid.DoesNotExist:
        raise PrepaidNotFound()

    prepaid.status = status
    prepaid.consumed_at = timezone.now() if status == PrepaidStatus.CONSUMED else None
    prepaid.save(update_fields=['status', 'consumed_at', 'updated_at'])
    return prepaid


def total_pending_for_client(*, client_id: UUID) -> Decimal:
    """Sum of PENDING, non-deleted prepaid amounts."""
    total = (
        Prepaid.objects.alive()
        .filter(client_id=client_id, status=PrepaidStatus.PENDING)
        .aggregate(total=Sum('amount'))['total']
    )
    return money(total)


@transaction.atomic
def create_prepaid(*, client_id: UUID, amount, notes: str = '') -> Prepaid:
    """
    Add prepaid credit to a client.

    Raises:
        ClientNotFound: If the client is missing or deleted
        InvalidInputError: If amount < 0.01
    """
    amount = money(amount)
    if amount < MIN_PREPAID_AMOUNT:
        raise InvalidInputError("Prepaid amount must be at least 0.01")

    if not Client.objects.alive().filter(id=client_id).exists():
        raise ClientNotFound()

    prepaid = Prepaid.objects.create(client_id=client_id, amount=amount, notes=notes)
    logger.info(
        "Prepaid created",
        extra={'client_id': str(client_id), 'prepaid_id': str(prepaid.id), 'amount': str(amount)},
    )
    return prepaid


def get_prepaid(*, prepaid_id: UUID) -> Prepaid:
    try:
        return Prepaid.objects.alive().select_related('client').get(id=prepaid_id)
    except Prepaid.DoesNotExist:
        raise PrepaidNotFound()


def client_prepaids(*, client_id: UUID, status: Optional[str] = None):
    """Non-deleted prepaids of an existing client, oldest first."""
    if not Client.objects.alive().filter(id=client_id).exists():
        raise ClientNotFound()

    queryset = Prepaid.objects.alive().filter(client_id=client_id).order_by('created_at')
    if status:
        queryset = queryset.filter(status=status)
    return queryset
