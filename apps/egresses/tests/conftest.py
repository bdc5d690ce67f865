import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.egresses.models import Egress, EgressStatus, EgressType, Currency


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        name='Shift Manager',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def make_egress(db):
    counter = {'n': 0}

    def _make(amount='100.00', currency=Currency.USD, status=EgressStatus.PENDING,
              type=EgressType.EXPENSE, concept='Milk supplier'):
        counter['n'] += 1
        return Egress.objects.create(
            egress_number=f"EGR-20250101-{counter['n']:03d}",
            concept=concept,
            amount=Decimal(amount),
            currency=currency,
            type=type,
            status=status,
        )
    return _make


@pytest.fixture
def egress(make_egress):
    return make_egress()
