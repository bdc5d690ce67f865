import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.employees.models import Employee, EmployeeRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='staff@example.com',
        password='TestPass123!',
        name='Staff User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as a back-office user."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def employee(db):
    """Create and return a cashier."""
    return Employee.objects.create(
        name='Lucía Gómez',
        email='lucia@cafe.example',
        role=EmployeeRole.CASHIER,
        phone='+54 11 5555-0000',
        start_date=date(2024, 3, 1),
    )


@pytest.fixture
def manager(db):
    return Employee.objects.create(
        name='Martín Díaz',
        email='martin@cafe.example',
        role=EmployeeRole.MANAGER,
        start_date=date(2023, 1, 15),
    )
