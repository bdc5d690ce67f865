"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import UserEmailConflict

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str = "",
    role: str = UserRole.USER,
    avatar: str = "",
) -> User:
    """
    Register a new back-office user.

    Public sign-up always passes role=user; only the admin endpoints
    forward a caller-chosen role.

    Args:
        email: User's email address (stored lowercased)
        password: User's password (will be hashed)
        name: Optional display name
        role: admin or user
        avatar: Optional avatar URL

    Returns:
        Created User instance

    Raises:
        UserEmailConflict: If the email is already registered
    """
    email = email.strip().lower()
    if User.objects.filter(email=email).exists():
        raise UserEmailConflict()

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            avatar=avatar,
        )
    except IntegrityError as e:
        raise UserEmailConflict() from e

    logger.info("User registered", extra={'user_id': str(user.id), 'role': role})
    return user
