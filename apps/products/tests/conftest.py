import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.products.models import Product, ProductCategory, ProductStatus, UnitOfMeasure


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='stock@example.com',
        password='TestPass123!',
        name='Stock Keeper',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def product(db):
    """Coffee with comfortable stock."""
    return Product.objects.create(
        name='Colombia Huila 250g',
        barcode='7790001000017',
        category=ProductCategory.COFFEE,
        unit_of_measure=UnitOfMeasure.UNIT,
        price=Decimal('150.00'),
        cost_price=Decimal('100.00'),
        profit_margin=Decimal('50.00'),
        stock=20,
        status=ProductStatus.ACTIVE,
    )


@pytest.fixture
def pastry(db):
    """Product close to running out."""
    return Product.objects.create(
        name='Medialuna',
        barcode='7790001000024',
        category=ProductCategory.PASTRY,
        unit_of_measure=UnitOfMeasure.UNIT,
        price=Decimal('8.00'),
        cost_price=Decimal('3.00'),
        profit_margin=Decimal('166.67'),
        stock=3,
        status=ProductStatus.INACTIVE,
    )
