"""Services for sale settlement."""

from .exceptions import (
    SaleNotFound,
    SaleAlreadyCompleted,
    SaleAlreadyCancelled,
    InvalidPrepaidAmount,
)
from .numbering import next_sale_number, sale_number_prefix
from .settlement import (
    create_sale,
    get_sale,
    get_daily_sales,
    update_sale,
    remove_sale,
)

__all__ = [
    # Exceptions
    'SaleNotFound',
    'SaleAlreadyCompleted',
    'SaleAlreadyCancelled',
    'InvalidPrepaidAmount',
    # Numbering
    'next_sale_number',
    'sale_number_prefix',
    # Settlement
    'create_sale',
    'get_sale',
    'get_daily_sales',
    'update_sale',
    'remove_sale',
]
