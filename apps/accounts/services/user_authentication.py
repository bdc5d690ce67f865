"""Email/password login for back-office staff."""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.db import transaction

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp last_login.

    Unknown emails and wrong passwords raise the same error so callers
    cannot probe which staff accounts exist. Soft-deleted users are
    treated as deactivated.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account deactivated or deleted
    """
    normalized = email.strip().lower()
    user = User.objects.select_for_update().filter(email=normalized).first()

    if user is None or not user.check_password(password):
        logger.warning("Failed login", extra={'email': normalized})
        raise InvalidCredentialsError()

    if not user.is_active or user.deleted_at is not None:
        logger.warning("Login to inactive account", extra={'user_id': str(user.id)})
        raise InactiveAccountError()

    update_last_login(None, user)
    return user
