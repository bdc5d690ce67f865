"""Domain-specific exceptions for the product ledger."""
from apps.common.exceptions import (
    NotFoundError,
    ConflictError,
    InvalidInputError,
    InsufficientResourceError,
)


class ProductNotFound(NotFoundError):
    default_detail = 'Product not found.'
    default_code = 'product_not_found'


class StockInsufficient(InsufficientResourceError):
    """Subtracting more units than are in stock."""
    default_detail = 'Insufficient stock.'
    default_code = 'stock_insufficient'


class InsufficientStockInSale(InsufficientResourceError):
    """A sale line asks for more units than are in stock."""
    default_detail = 'Insufficient stock for sale.'
    default_code = 'insufficient_stock_in_sale'


class PriceInvalid(InvalidInputError):
    default_detail = 'Price must be greater than cost price.'
    default_code = 'price_invalid'


class BarcodeConflict(ConflictError):
    default_detail = 'A product with this barcode already exists.'
    default_code = 'barcode_conflict'
