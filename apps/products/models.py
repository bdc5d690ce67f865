from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.common.models import SoftDeleteModel


class ProductCategory(models.TextChoices):
    ORGANIC = 'organic', 'Organic'
    AROMATIC = 'aromatic', 'Aromatic'
    WELLNESS = 'wellness', 'Wellness'
    COFFEE = 'coffee', 'Coffee'
    PASTRY = 'pastry', 'Pastry'
    OTHER = 'other', 'Other'


class UnitOfMeasure(models.TextChoices):
    UNIT = 'unit', 'Unit'
    GRAM = 'gram', 'Gram'
    KILOGRAM = 'kilogram', 'Kilogram'
    LITER = 'liter', 'Liter'
    MILLILITER = 'milliliter', 'Milliliter'


class ProductStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    OUT_OF_STOCK = 'out_of_stock', 'Out of stock'


class Product(SoftDeleteModel):
    """
    Sellable item with its stock count.

    ``status`` and ``profit_margin`` are derived by the service layer
    whenever stock or prices change; they are never set directly.
    """

    name = models.CharField(max_length=200)
    barcode = models.CharField(max_length=64, unique=True)
    category = models.CharField(max_length=20, choices=ProductCategory.choices)
    unit_of_measure = models.CharField(max_length=20, choices=UnitOfMeasure.choices)
    image = models.CharField(max_length=500, blank=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    profit_margin = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    stock = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE
    )

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category'], name='products_category_idx'),
            models.Index(fields=['status'], name='products_status_idx'),
            models.Index(fields=['stock'], name='products_stock_idx'),
        ]

    def __str__(self):
        return f"{self.name} [{self.barcode}]"
