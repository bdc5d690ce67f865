import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.clients.models import Client, Prepaid, PrepaidStatus


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='front@example.com',
        password='TestPass123!',
        name='Front Desk',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def client_obj(db):
    """A client with no credit. Named to avoid pytest-django's ``client``."""
    return Client.objects.create(
        full_name='Valentina Torres',
        phone='+54 11 4444-1234',
        email='valentina@example.com',
        cuit='27-12345678-4',
    )


@pytest.fixture
def other_client_obj(db):
    return Client.objects.create(full_name='Joaquín Ríos', email='joaquin@example.com')


@pytest.fixture
def make_prepaid(db):
    """Factory for prepaids with increasing created_at so FIFO order is explicit."""
    base = timezone.now() - timedelta(days=30)
    counter = {'n': 0}

    def _make(client, amount, status=PrepaidStatus.PENDING, notes=''):
        counter['n'] += 1
        return Prepaid.objects.create(
            client=client,
            amount=Decimal(str(amount)),
            status=status,
            notes=notes,
            created_at=base + timedelta(hours=counter['n']),
        )
    return _make
