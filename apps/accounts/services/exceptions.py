"""Domain-specific exceptions for accounts services."""
from rest_framework.exceptions import APIException

from apps.common.exceptions import NotFoundError, ConflictError


class UserNotFound(NotFoundError):
    default_detail = 'User not found.'
    default_code = 'user_not_found'


class UserEmailConflict(ConflictError):
    default_detail = 'A user with this email already exists.'
    default_code = 'user_email_conflict'


class InvalidCredentialsError(APIException):
    """Raised when authentication credentials are invalid."""
    status_code = 401
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class InactiveAccountError(APIException):
    """Raised when account is deactivated or deleted."""
    status_code = 403
    default_detail = 'Account is deactivated.'
    default_code = 'inactive_account'
