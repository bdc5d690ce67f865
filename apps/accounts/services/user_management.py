"""User administration: lookup, edit and soft delete."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from .exceptions import UserNotFound, UserEmailConflict

User = get_user_model()
logger = logging.getLogger(__name__)


def get_user(*, user_id: UUID) -> User:
    """Return a non-deleted user or raise UserNotFound."""
    try:
        return User.objects.alive().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFound()


@transaction.atomic
def update_user(
    *,
    user_id: UUID,
    email: Optional[str] = None,
    password: Optional[str] = None,
    **fields,
) -> User:
    """
    Update a user's profile.

    Args:
        user_id: User to update
        email: New email, checked for uniqueness
        password: New password, re-hashed when given
        **fields: name, role, avatar

    Raises:
        UserNotFound: If the user is missing or deleted
        UserEmailConflict: If the new email belongs to someone else
    """
    try:
        user = User.objects.alive().select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFound()

    if email is not None:
        email = email.strip().lower()
        if User.objects.filter(email=email).exclude(id=user.id).exists():
            raise UserEmailConflict()
        user.email = email

    if password:
        user.set_password(password)

    for name, value in fields.items():
        setattr(user, name, value)

    user.save()
    return user


@transaction.atomic
def delete_user(*, user_id: UUID) -> None:
    """Soft-delete a user."""
    user = get_user(user_id=user_id)
    user.soft_delete()
    logger.info("User deleted", extra={'user_id': str(user_id)})
