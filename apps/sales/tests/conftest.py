import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.clients.models import Client, Prepaid, PrepaidStatus
from apps.products.models import Product, ProductCategory, ProductStatus, UnitOfMeasure


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='cashier@example.com',
        password='TestPass123!',
        name='Cashier',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def product(db):
    """Round price so totals are easy to follow."""
    return Product.objects.create(
        name='Espresso Blend 1kg',
        barcode='7790002000016',
        category=ProductCategory.COFFEE,
        unit_of_measure=UnitOfMeasure.UNIT,
        price=Decimal('100.00'),
        cost_price=Decimal('60.00'),
        profit_margin=Decimal('66.67'),
        stock=20,
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture
def cookie(db):
    return Product.objects.create(
        name='Alfajor',
        barcode='7790002000023',
        category=ProductCategory.PASTRY,
        unit_of_measure=UnitOfMeasure.UNIT,
        price=Decimal('5.00'),
        cost_price=Decimal('2.00'),
        profit_margin=Decimal('150.00'),
        stock=2,
        status=ProductStatus.INACTIVE,
    )


@pytest.fixture
def client_obj(db):
    return Client.objects.create(full_name='Valentina Torres', email='valentina@example.com')


@pytest.fixture
def make_prepaid(db):
    """Factory for prepaids with increasing created_at so FIFO order is explicit."""
    base = timezone.now() - timedelta(days=30)
    counter = {'n': 0}

    def _make(client, amount, status=PrepaidStatus.PENDING):
        counter['n'] += 1
        return Prepaid.objects.create(
            client=client,
            amount=Decimal(str(amount)),
            status=status,
            created_at=base + timedelta(hours=counter['n']),
        )
    return _make


@pytest.fixture
def line():
    """Build one sale line for a product."""
    def _line(product, quantity=1, unit_price=None):
        return {
            'product_id': product.id,
            'quantity': quantity,
            'unit_price': unit_price if unit_price is not None else product.price,
        }
    return _line
