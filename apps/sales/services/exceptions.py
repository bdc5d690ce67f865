"""Domain-specific exceptions for sale settlement."""
from apps.common.exceptions import NotFoundError, StateConflictError, InvalidInputError


class SaleNotFound(NotFoundError):
    default_detail = 'Sale not found.'
    default_code = 'sale_not_found'


class SaleAlreadyCompleted(StateConflictError):
    """A completed sale can only be cancelled."""
    default_detail = 'Sale is already completed; it can only be cancelled.'
    default_code = 'sale_already_completed'


class SaleAlreadyCancelled(StateConflictError):
    default_detail = 'Sale is already cancelled.'
    default_code = 'sale_already_cancelled'


class InvalidPrepaidAmount(InvalidInputError):
    """prepaid_used exceeds subtotal + tax - discount."""
    default_detail = 'Prepaid amount exceeds the sale amount.'
    default_code = 'invalid_prepaid_amount'
