"""
Error taxonomy shared by every app.

Services raise these (or app-specific subclasses of them) and DRF renders
them as ``{"detail": "..."}`` with the category's status code, so views
never translate errors by hand.

Exception Hierarchy:
    APIException
    ├── NotFoundError               404
    ├── ConflictError               409
    │   └── ConcurrentModification  409
    ├── InvalidInputError           400
    ├── StateConflictError          409
    ├── InsufficientResourceError   400
    └── OperationFailed             500

Usage:
    from apps.common.exceptions import NotFoundError

    class ProductNotFound(NotFoundError):
        default_detail = 'Product not found.'
        default_code = 'product_not_found'
"""
from rest_framework.exceptions import APIException


class NotFoundError(APIException):
    """Entity does not exist or is soft-deleted."""
    status_code = 404
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class ConflictError(APIException):
    """Duplicate value for a unique key."""
    status_code = 409
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


class ConcurrentModification(ConflictError):
    """A concurrent write invalidated this one; the caller may retry."""
    default_detail = 'The resource was modified concurrently. Please retry.'
    default_code = 'concurrent_modification'


class InvalidInputError(APIException):
    """Input violates a business rule."""
    status_code = 400
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class StateConflictError(APIException):
    """Operation not allowed in the entity's current state."""
    status_code = 409
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'state_conflict'


class InsufficientResourceError(APIException):
    """Not enough stock or balance."""
    status_code = 400
    default_detail = 'Insufficient resources.'
    default_code = 'insufficient_resource'


class OperationFailed(APIException):
    """Unexpected persistence failure. The cause is chained, never exposed."""
    status_code = 500
    default_detail = 'The operation could not be completed.'
    default_code = 'operation_failed'
