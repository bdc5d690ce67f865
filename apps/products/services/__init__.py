"""Services for the product ledger."""

from .exceptions import (
    ProductNotFound,
    StockInsufficient,
    InsufficientStockInSale,
    PriceInvalid,
    BarcodeConflict,
)
from .stock_ledger import (
    ADD,
    SUBTRACT,
    derive_status,
    adjust_stock,
    validate_and_price,
    debit_stock,
    credit_stock,
)
from .product_management import (
    compute_profit_margin,
    create_product,
    get_product,
    update_product,
    delete_product,
)

__all__ = [
    # Exceptions
    'ProductNotFound',
    'StockInsufficient',
    'InsufficientStockInSale',
    'PriceInvalid',
    'BarcodeConflict',
    # Stock ledger
    'ADD',
    'SUBTRACT',
    'derive_status',
    'adjust_stock',
    'validate_and_price',
    'debit_stock',
    'credit_stock',
    # Catalogue
    'compute_profit_margin',
    'create_product',
    'get_product',
    'update_product',
    'delete_product',
]
