"""
Stock ledger: the only code that changes Product.stock.

All functions lock the product rows they touch with select_for_update(),
so callers must run inside transaction.atomic (the public functions here
open one themselves when called standalone).
"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.common.exceptions import InvalidInputError
from apps.common.money import money, ZERO
from apps.products.models import Product, ProductStatus
from .exceptions import ProductNotFound, StockInsufficient, InsufficientStockInSale

logger = logging.getLogger(__name__)

ADD = 'add'
SUBTRACT = 'subtract'


def derive_status(stock: int) -> str:
    """out_of_stock at zero, inactive below the low-stock threshold, else active."""
    if stock <= 0:
        return ProductStatus.OUT_OF_STOCK
    if stock < settings.LOW_STOCK_THRESHOLD:
        return ProductStatus.INACTIVE
    return ProductStatus.ACTIVE


def _apply_delta(product: Product, delta: int) -> Product:
    product.stock += delta
    product.status = derive_status(product.stock)
    product.save(update_fields=['stock', 'status', 'updated_at'])
    return product


@transaction.atomic
def adjust_stock(*, product_id: UUID, quantity: int, direction: str) -> Product:
    """
    Add or subtract units of a product.

    Args:
        product_id: Product to adjust
        quantity: Units, at least 1
        direction: 'add' or 'subtract'

    Returns:
        Updated Product with recomputed status

    Raises:
        ProductNotFound: If missing or soft-deleted
        StockInsufficient: If subtracting more than the current stock
        InvalidInputError: If quantity < 1 or direction is unknown
    """
    if direction not in (ADD, SUBTRACT):
        raise InvalidInputError(f"Unknown stock direction: {direction}")
    if quantity < 1:
        raise InvalidInputError("Quantity must be at least 1")

    try:
        product = Product.objects.alive().select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFound()

    if direction == SUBTRACT and quantity > product.stock:
        logger.warning(
            "Stock subtraction rejected",
            extra={'product_id': str(product_id), 'requested': quantity, 'available': product.stock},
        )
        raise StockInsufficient(
            f"Insufficient stock for {product.name}: available {product.stock}, requested {quantity}"
        )

    delta = quantity if direction == ADD else -quantity
    _apply_delta(product, delta)

    logger.info(
        "Stock adjusted",
        extra={'product_id': str(product_id), 'delta': delta, 'stock': product.stock},
    )
    return product


def _lock_products(product_ids: Iterable[UUID], *, include_deleted=False) -> dict:
    queryset = Product.objects.all() if include_deleted else Product.objects.alive()
    # Deterministic lock order avoids deadlocks between concurrent sales
    products = queryset.select_for_update().filter(id__in=set(product_ids)).order_by('id')
    return {product.id: product for product in products}


def _totals_by_product(items) -> OrderedDict:
    totals = OrderedDict()
    for item in items:
        product_id = UUID(str(item['product_id']))
        totals[product_id] = totals.get(product_id, 0) + int(item['quantity'])
    return totals


def validate_and_price(*, items: list[dict]) -> tuple[list[dict], Decimal]:
    """
    Check sale lines against stock and price them.

    The caller-supplied ``unit_price`` is used as-is, so a line may be
    sold below the catalogue price. Rows are locked for the rest of the
    surrounding transaction.

    Args:
        items: Dicts with product_id, quantity, unit_price

    Returns:
        (processed_items, subtotal) where each processed item carries
        product, product_name, quantity, unit_price and subtotal

    Raises:
        ProductNotFound: If any product id is missing or soft-deleted
        InsufficientStockInSale: If requested quantity exceeds stock
    """
    products = _lock_products(UUID(str(item['product_id'])) for item in items)

    requested = {}
    processed = []
    subtotal = ZERO

    for item in items:
        product_id = UUID(str(item['product_id']))
        product = products.get(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found")

        quantity = int(item['quantity'])
        requested[product_id] = requested.get(product_id, 0) + quantity
        if requested[product_id] > product.stock:
            logger.warning(
                "Sale line exceeds stock",
                extra={'product_id': str(product_id), 'requested': requested[product_id], 'available': product.stock},
            )
            raise InsufficientStockInSale(
                f"Insufficient stock for {product.name}: available {product.stock}, requested {requested[product_id]}"
            )

        unit_price = money(item['unit_price'])
        line_total = money(unit_price * quantity)
        subtotal += line_total

        processed.append({
            'product': product,
            'product_name': product.name,
            'quantity': quantity,
            'unit_price': unit_price,
            'subtotal': line_total,
        })

    return processed, money(subtotal)


def debit_stock(*, items: list[dict]) -> None:
    """
    Remove sold units. Items need product_id and quantity.

    Raises:
        ProductNotFound: If a product disappeared
        StockInsufficient: If any product would go negative
    """
    totals = _totals_by_product(items)
    products = _lock_products(totals.keys())

    for product_id, quantity in totals.items():
        product = products.get(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found")
        if quantity > product.stock:
            raise StockInsufficient(
                f"Insufficient stock for {product.name}: available {product.stock}, requested {quantity}"
            )
        _apply_delta(product, -quantity)


def credit_stock(*, items: list[dict]) -> None:
    """
    Return units to stock, e.g. when a sale is cancelled.

    Soft-deleted products are credited too; the units physically exist.
    """
    totals = _totals_by_product(items)
    products = _lock_products(totals.keys(), include_deleted=True)

    for product_id, quantity in totals.items():
        product = products.get(product_id)
        if product is None:
            logger.warning("Cannot credit stock for missing product", extra={'product_id': str(product_id)})
            continue
        _apply_delta(product, quantity)
