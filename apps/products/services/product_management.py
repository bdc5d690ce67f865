"""Product catalogue CRUD."""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.common.money import money, ZERO
from apps.products.models import Product
from .exceptions import ProductNotFound, PriceInvalid, BarcodeConflict
from .stock_ledger import derive_status

logger = logging.getLogger(__name__)


def compute_profit_margin(price, cost_price) -> Decimal:
    """(price - cost) / cost * 100, or 0 when cost is 0."""
    price, cost_price = money(price), money(cost_price)
    if cost_price == ZERO:
        return ZERO
    return money((price - cost_price) / cost_price * 100)


def _check_prices(price, cost_price) -> None:
    if money(price) <= money(cost_price):
        raise PriceInvalid()


def _barcode_taken(barcode: str, exclude_id=None) -> bool:
    queryset = Product.objects.filter(barcode=barcode)
    if exclude_id is not None:
        queryset = queryset.exclude(id=exclude_id)
    return queryset.exists()


@transaction.atomic
def create_product(
    *,
    name: str,
    barcode: str,
    category: str,
    unit_of_measure: str,
    price: Decimal,
    cost_price: Decimal,
    stock: int = 0,
    image: str = '',
    description: str = '',
) -> Product:
    """
    Create a catalogue product.

    Args:
        name: Display name
        barcode: Unique barcode
        category: ProductCategory value
        unit_of_measure: UnitOfMeasure value
        price: Sale price, must exceed cost_price
        cost_price: Purchase cost
        stock: Initial units on hand
        image: Optional image URL
        description: Optional description

    Returns:
        Created Product with derived status and profit_margin

    Raises:
        PriceInvalid: If price <= cost_price
        BarcodeConflict: If the barcode is already used
    """
    _check_prices(price, cost_price)

    barcode = barcode.strip()
    if _barcode_taken(barcode):
        raise BarcodeConflict()

    try:
        product = Product.objects.create(
            name=name.strip(),
            barcode=barcode,
            category=category,
            unit_of_measure=unit_of_measure,
            price=money(price),
            cost_price=money(cost_price),
            profit_margin=compute_profit_margin(price, cost_price),
            stock=stock,
            status=derive_status(stock),
            image=image,
            description=description,
        )
    except IntegrityError as e:
        raise BarcodeConflict() from e

    logger.info("Product created", extra={'product_id': str(product.id), 'barcode': barcode})
    return product


def get_product(*, product_id: UUID) -> Product:
    """Return a non-deleted product or raise ProductNotFound."""
    try:
        return Product.objects.alive().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFound()


@transaction.atomic
def update_product(*, product_id: UUID, **fields) -> Product:
    """
    Partially update a product.

    Price rules are checked on the merged price/cost_price. Changing
    stock here recomputes status just like adjust_stock.

    Raises:
        ProductNotFound: If missing or soft-deleted
        PriceInvalid: If the resulting price <= cost_price
        BarcodeConflict: If the new barcode belongs to another product
    """
    try:
        product = Product.objects.alive().select_for_update().get(id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFound()

    price = fields.get('price', product.price)
    cost_price = fields.get('cost_price', product.cost_price)
    _check_prices(price, cost_price)

    if 'barcode' in fields:
        fields['barcode'] = fields['barcode'].strip()
        if _barcode_taken(fields['barcode'], exclude_id=product.id):
            raise BarcodeConflict()

    for name, value in fields.items():
        setattr(product, name, value)

    product.price = money(price)
    product.cost_price = money(cost_price)
    product.profit_margin = compute_profit_margin(price, cost_price)
    product.status = derive_status(product.stock)

    try:
        product.save()
    except IntegrityError as e:
        raise BarcodeConflict() from e
    return product


@transaction.atomic
def delete_product(*, product_id: UUID) -> None:
    """Soft-delete; the row stays for sale history."""
    product = get_product(product_id=product_id)
    product.soft_delete()
    logger.info("Product deleted", extra={'product_id': str(product_id)})
