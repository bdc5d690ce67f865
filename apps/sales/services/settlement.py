"""
Sale settlement: prices a basket, consumes prepaid credit, moves stock.

Every mutation runs in one transaction. Domain errors (missing product,
short stock, consumed prepaid...) propagate unchanged; any other database
failure is logged and surfaced as OperationFailed.

Totals:
    tax_amount      = subtotal * tax / 100
    discount_amount = subtotal * discount / 100
    total           = max(0, subtotal + tax_amount - discount_amount - prepaid_used)
"""

import functools
import logging
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import transaction, DatabaseError, IntegrityError
from django.utils import timezone as dj_timezone
from django.utils.dateparse import parse_date

from apps.clients.models import Client, PrepaidStatus
from apps.clients.services import (
    ClientNotFound,
    consume_by_amount_fifo,
    consume_specific,
    restore,
    update_status,
)
from apps.common.exceptions import (
    ConcurrentModification,
    InvalidInputError,
    OperationFailed,
)
from apps.common.money import money, percent_of, ZERO
from apps.products.services import validate_and_price, debit_stock, credit_stock
from apps.sales.models import Sale, SaleItem, SaleStatus, PaymentMethod
from .exceptions import (
    SaleNotFound,
    SaleAlreadyCompleted,
    SaleAlreadyCancelled,
    InvalidPrepaidAmount,
)
from .numbering import next_sale_number

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ('customer_name', 'customer_email', 'customer_phone', 'notes', 'payment_method')


def _wrap_database_errors(operation: str):
    """Turn unexpected DatabaseError into OperationFailed, keeping the cause."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as e:
                logger.exception("Sale %s failed", operation, extra={'operation': operation})
                raise OperationFailed() from e
        return wrapper
    return decorator


def _amounts(subtotal: Decimal, tax, discount) -> tuple[Decimal, Decimal, Decimal]:
    """Return (tax_amount, discount_amount, amount_due_before_prepaid)."""
    tax_amount = percent_of(subtotal, tax)
    discount_amount = percent_of(subtotal, discount)
    return tax_amount, discount_amount, money(subtotal + tax_amount - discount_amount)


def _check_prepaid_ceiling(prepaid_used: Decimal, ceiling: Decimal) -> None:
    if prepaid_used > ceiling:
        raise InvalidPrepaidAmount(
            f"Prepaid amount {prepaid_used} exceeds the sale amount {ceiling}"
        )


def _final_total(ceiling: Decimal, prepaid_used: Decimal) -> Decimal:
    return max(ZERO, money(ceiling - prepaid_used))


def _resolve_client(client_id: Optional[UUID]) -> Optional[Client]:
    if client_id is None:
        return None
    try:
        return Client.objects.alive().get(id=client_id)
    except Client.DoesNotExist:
        raise ClientNotFound()


def _create_items(sale: Sale, processed: list[dict]) -> None:
    SaleItem.objects.bulk_create([
        SaleItem(
            sale=sale,
            product=line['product'],
            product_name=line['product_name'],
            quantity=line['quantity'],
            unit_price=line['unit_price'],
            subtotal=line['subtotal'],
        )
        for line in processed
    ])


def _stock_lines(processed: list[dict]) -> list[dict]:
    return [{'product_id': line['product'].id, 'quantity': line['quantity']} for line in processed]


def _current_stock_lines(sale: Sale) -> list[dict]:
    return [{'product_id': item.product_id, 'quantity': item.quantity} for item in sale.items.all()]


def _give_back_prepaid(sale: Sale) -> None:
    """
    Undo the sale's prepaid consumption.

    A targeted prepaid is flipped back to PENDING in place. FIFO
    consumption may have split several records, so its amount comes
    back as one new PENDING record instead. A prepaid_used typed in by
    hand never touched the ledger, so nothing is given back for it.
    """
    if sale.prepaid_id:
        update_status(prepaid_id=sale.prepaid_id, status=PrepaidStatus.PENDING)
    elif sale.client_id and sale.fifo_consumed > ZERO:
        restore(client_id=sale.client_id, amount=sale.fifo_consumed)


def _reverse(sale: Sale) -> None:
    credit_stock(items=_current_stock_lines(sale))
    _give_back_prepaid(sale)


def _lock_sale(sale_id: UUID) -> Sale:
    try:
        return Sale.objects.alive().select_for_update().get(id=sale_id)
    except Sale.DoesNotExist:
        raise SaleNotFound()


# =============================================================================
# Create
# =============================================================================

@_wrap_database_errors('create')
@transaction.atomic
def create_sale(
    *,
    actor,
    items: list[dict],
    payment_method: str,
    client_id: Optional[UUID] = None,
    tax=0,
    discount=0,
    prepaid_used=None,
    prepaid_id: Optional[UUID] = None,
    consumed_prepaid: bool = False,
    customer_name: str = '',
    customer_email: str = '',
    customer_phone: str = '',
    notes: str = '',
) -> Sale:
    """
    Settle a new sale.

    Prepaid credit is applied in one of three ways:
      - ``consumed_prepaid`` with ``prepaid_id``: that record is consumed
        in full and its errors fail the sale.
      - a client paying CASH with no explicit ``prepaid_used``: pending
        prepaids are consumed oldest first, best effort.
      - otherwise ``prepaid_used`` is taken as given (default 0).

    Args:
        actor: User registering the sale
        items: Dicts with product_id, quantity, unit_price
        payment_method: PaymentMethod value
        client_id: Optional owning client
        tax: Percentage of subtotal added
        discount: Percentage of subtotal removed
        prepaid_used: Explicit prepaid amount applied
        prepaid_id: Specific prepaid to consume
        consumed_prepaid: Whether to consume ``prepaid_id``

    Returns:
        The COMPLETED Sale

    Raises:
        ClientNotFound: Unknown or deleted client
        ProductNotFound / InsufficientStockInSale: From the stock ledger
        PrepaidNotFound / PrepaidAlreadyConsumed: Targeted prepaid unusable
        InvalidPrepaidAmount: prepaid_used above subtotal + tax - discount
        ConcurrentModification: Another sale took the same number
        OperationFailed: Unexpected database error
    """
    client = _resolve_client(client_id)

    processed, subtotal = validate_and_price(items=items)
    sale_number = next_sale_number()

    _, _, ceiling = _amounts(subtotal, tax, discount)

    applied_prepaid_id = None
    fifo_consumed = ZERO
    if consumed_prepaid and prepaid_id:
        used = consume_specific(prepaid_id=prepaid_id, amount=ceiling)
        applied_prepaid_id = prepaid_id
    elif client is not None and payment_method == PaymentMethod.CASH and prepaid_used is None:
        used = consume_by_amount_fifo(client_id=client.id, amount=ceiling)
        fifo_consumed = used
    else:
        used = money(prepaid_used)

    _check_prepaid_ceiling(used, ceiling)

    try:
        with transaction.atomic():
            sale = Sale.objects.create(
                sale_number=sale_number,
                client=client,
                customer_name=customer_name,
                customer_email=(customer_email or '').strip().lower(),
                customer_phone=customer_phone,
                subtotal=subtotal,
                tax=money(tax),
                discount=money(discount),
                prepaid_used=used,
                prepaid_id=applied_prepaid_id,
                fifo_consumed=fifo_consumed,
                total=_final_total(ceiling, used),
                payment_method=payment_method,
                status=SaleStatus.PENDING,
                notes=notes,
            )
    except IntegrityError as e:
        logger.warning("Sale number collision", extra={'sale_number': sale_number})
        raise ConcurrentModification() from e

    _create_items(sale, processed)
    debit_stock(items=_stock_lines(processed))

    sale.status = SaleStatus.COMPLETED
    sale.save(update_fields=['status', 'updated_at'])

    logger.info(
        "Sale created",
        extra={
            'sale_id': str(sale.id),
            'sale_number': sale.sale_number,
            'total': str(sale.total),
            'prepaid_used': str(sale.prepaid_used),
            'actor_id': str(getattr(actor, 'id', '') or ''),
        },
    )
    return sale


# =============================================================================
# Read
# =============================================================================

def get_sale(*, sale_id: UUID) -> Sale:
    """Return a non-deleted sale with its items, or raise SaleNotFound."""
    try:
        return Sale.objects.alive().prefetch_related('items').get(id=sale_id)
    except Sale.DoesNotExist:
        raise SaleNotFound()


def _business_zone(name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(name or settings.BUSINESS_TIME_ZONE)
    except (KeyError, ValueError):
        raise InvalidInputError(f"Unknown timezone: {name}")


def get_daily_sales(*, date: Optional[str] = None, timezone: Optional[str] = None) -> dict:
    """
    Sales of one local calendar day plus a summary.

    Args:
        date: ``YYYY-MM-DD``; defaults to today in ``timezone``
        timezone: IANA name; defaults to BUSINESS_TIME_ZONE

    Returns:
        {'date', 'timezone', 'sales', 'summary': {total_sales, total_amount,
        by_payment_method, by_status}}

    Raises:
        InvalidInputError: Unknown timezone or malformed date
    """
    zone = _business_zone(timezone)

    if date:
        try:
            day = parse_date(str(date))
        except ValueError:
            day = None
        if day is None:
            raise InvalidInputError(f"Invalid date: {date}")
    else:
        day = dj_timezone.now().astimezone(zone).date()

    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)

    sales = list(
        Sale.objects.alive()
        .filter(created_at__gte=start, created_at__lt=end)
        .order_by('-created_at')
    )

    by_payment_method = {method: ZERO for method in PaymentMethod.values}
    by_status = {status: 0 for status in SaleStatus.values}
    total_amount = ZERO
    for sale in sales:
        total_amount += sale.total
        by_payment_method[sale.payment_method] += sale.total
        by_status[sale.status] += 1

    return {
        'date': day,
        'timezone': zone.key,
        'sales': sales,
        'summary': {
            'total_sales': len(sales),
            'total_amount': money(total_amount),
            'by_payment_method': {k: money(v) for k, v in by_payment_method.items()},
            'by_status': by_status,
        },
    }


# =============================================================================
# Update / delete
# =============================================================================

def _cancel(sale: Sale, actor) -> Sale:
    _reverse(sale)
    sale.status = SaleStatus.CANCELLED
    sale.save(update_fields=['status', 'updated_at'])
    logger.info(
        "Sale cancelled",
        extra={
            'sale_id': str(sale.id),
            'sale_number': sale.sale_number,
            'actor_id': str(getattr(actor, 'id', '') or ''),
        },
    )
    return sale


def _replace_prepaid(sale: Sale, changes: dict) -> None:
    prepaid_id = changes.pop('prepaid_id')
    consumed_prepaid = changes.pop('consumed_prepaid', False)

    if sale.prepaid_id or sale.fifo_consumed > ZERO:
        _give_back_prepaid(sale)
        sale.prepaid_id = None
        sale.fifo_consumed = ZERO
        sale.prepaid_used = ZERO

    if prepaid_id and consumed_prepaid:
        sale.prepaid_used = consume_specific(prepaid_id=prepaid_id)
        sale.prepaid_id = prepaid_id


def _replace_items(sale: Sale, items: list[dict]) -> None:
    credit_stock(items=_current_stock_lines(sale))
    sale.items.all().delete()

    processed, subtotal = validate_and_price(items=items)
    _create_items(sale, processed)
    debit_stock(items=_stock_lines(processed))
    sale.subtotal = subtotal


@_wrap_database_errors('update')
@transaction.atomic
def update_sale(*, sale_id: UUID, actor, **changes) -> Sale:
    """
    Change a sale.

    - Cancelled sales are frozen.
    - ``status=CANCELLED`` reverses stock and prepaid; any other field
      sent alongside it is ignored.
    - Completed sales accept nothing but cancellation.
    - Pending sales may change items, tax, discount, prepaid and
      customer fields; totals are recomputed and the prepaid amount is
      re-checked against the new ceiling.

    Raises:
        SaleNotFound: Missing or deleted
        SaleAlreadyCancelled: Sale is CANCELLED
        SaleAlreadyCompleted: Non-cancellation change on a COMPLETED sale
        InvalidPrepaidAmount: prepaid_used above the recomputed ceiling
    """
    sale = _lock_sale(sale_id)

    if sale.status == SaleStatus.CANCELLED:
        raise SaleAlreadyCancelled()

    status = changes.pop('status', None)
    if status == SaleStatus.CANCELLED:
        return _cancel(sale, actor)

    if sale.status == SaleStatus.COMPLETED:
        if changes or status is not None:
            raise SaleAlreadyCompleted()
        return sale

    if 'prepaid_id' in changes:
        _replace_prepaid(sale, changes)
    changes.pop('consumed_prepaid', None)

    if 'items' in changes:
        _replace_items(sale, changes.pop('items'))

    for field in ('tax', 'discount'):
        if field in changes:
            setattr(sale, field, money(changes.pop(field)))
    if changes.get('prepaid_used') is not None:
        sale.prepaid_used = money(changes.pop('prepaid_used'))
    changes.pop('prepaid_used', None)

    _, _, ceiling = _amounts(sale.subtotal, sale.tax, sale.discount)
    _check_prepaid_ceiling(sale.prepaid_used, ceiling)
    sale.total = _final_total(ceiling, sale.prepaid_used)

    for field in CUSTOMER_FIELDS:
        if field in changes:
            setattr(sale, field, changes.pop(field))
    sale.customer_email = (sale.customer_email or '').strip().lower()

    if status == SaleStatus.COMPLETED:
        sale.status = SaleStatus.COMPLETED

    sale.save()
    logger.info("Sale updated", extra={'sale_id': str(sale.id), 'total': str(sale.total)})
    return sale


@_wrap_database_errors('delete')
@transaction.atomic
def remove_sale(*, sale_id: UUID, actor) -> None:
    """
    Soft-delete a sale, returning its stock and prepaid credit.

    A cancelled sale was already reversed, so it is only hidden.
    """
    sale = _lock_sale(sale_id)

    if sale.status != SaleStatus.CANCELLED:
        _reverse(sale)

    sale.soft_delete()
    logger.info(
        "Sale deleted",
        extra={'sale_id': str(sale.id), 'actor_id': str(getattr(actor, 'id', '') or '')},
    )
