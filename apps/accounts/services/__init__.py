"""Services for accounts business logic."""

from .exceptions import (
    UserNotFound,
    UserEmailConflict,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .user_management import get_user, update_user, delete_user

__all__ = [
    # Exceptions
    'UserNotFound',
    'UserEmailConflict',
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'register_user',
    'authenticate_user',
    'get_user',
    'update_user',
    'delete_user',
]
