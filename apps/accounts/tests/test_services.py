"""
Service layer tests for accounts.

Tests cover:
- Registration and email normalization
- Authentication failures
- Admin edits and soft delete
"""

import pytest
from uuid import uuid4

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    register_user,
    authenticate_user,
    get_user,
    update_user,
    delete_user,
)
from apps.accounts.services.exceptions import (
    UserNotFound,
    UserEmailConflict,
    InvalidCredentialsError,
    InactiveAccountError,
)


@pytest.mark.django_db
class TestRegisterUser:

    def test_register_lowercases_email(self):
        user = register_user(email='  New.User@Example.COM ', password='StrongPass123!')

        assert user.email == 'new.user@example.com'
        assert user.role == UserRole.USER
        assert user.check_password('StrongPass123!')

    def test_register_with_admin_role(self):
        user = register_user(email='boss@example.com', password='StrongPass123!', role=UserRole.ADMIN)

        assert user.is_admin is True

    def test_register_duplicate_email_conflicts(self, user):
        with pytest.raises(UserEmailConflict):
            register_user(email=user.email.upper(), password='StrongPass123!')


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_authenticate_success_sets_last_login(self, user):
        authenticated = authenticate_user(email='TestUser@example.com', password='TestPass123!')

        assert authenticated.id == user.id
        assert authenticated.last_login is not None

    def test_authenticate_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='wrong')

    def test_authenticate_unknown_email(self):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='nobody@example.com', password='whatever')

    def test_authenticate_inactive(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')

    def test_authenticate_deleted(self, user):
        user.soft_delete()

        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user.email, password='TestPass123!')


@pytest.mark.django_db
class TestUserManagement:

    def test_get_user_not_found(self):
        with pytest.raises(UserNotFound):
            get_user(user_id=uuid4())

    def test_update_user_fields_and_password(self, user):
        updated = update_user(user_id=user.id, name='Renamed', password='AnotherPass456!')

        assert updated.name == 'Renamed'
        assert updated.check_password('AnotherPass456!')

    def test_update_user_email_conflict(self, user, other_user):
        with pytest.raises(UserEmailConflict):
            update_user(user_id=user.id, email=other_user.email)

    def test_delete_user_soft_deletes(self, user):
        delete_user(user_id=user.id)

        user.refresh_from_db()
        assert user.deleted_at is not None
        assert user.is_active is False
        assert User.objects.filter(id=user.id).exists()

        with pytest.raises(UserNotFound):
            get_user(user_id=user.id)
