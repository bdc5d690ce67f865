import pytest
from rest_framework.test import APIRequestFactory
from apps.accounts.models import User


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='auditor@example.com',
        password='TestPass123!',
        name='Auditor',
    )


@pytest.fixture
def request_factory():
    return APIRequestFactory()
