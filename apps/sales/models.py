from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from apps.common.models import SoftDeleteModel, TimeStampedModel


class PaymentMethod(models.TextChoices):
    CASH = 'CASH', 'Cash'
    CARD = 'CARD', 'Card'
    TRANSFER = 'TRANSFER', 'Transfer'


class SaleStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


PERCENT_VALIDATORS = [
    MinValueValidator(Decimal('0.00')),
    MaxValueValidator(Decimal('100.00')),
]


class Sale(SoftDeleteModel):
    """
    A settled basket of products.

    ``tax`` and ``discount`` are percentages of the subtotal;
    ``prepaid_used`` is an amount. ``prepaid`` is set only when a
    specific prepaid record paid for the sale.
    """

    sale_number = models.CharField(max_length=20, unique=True)

    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='sales'
    )
    customer_name = models.CharField(max_length=100, blank=True)
    customer_email = models.EmailField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=20, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    discount = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    prepaid_used = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    # Part of prepaid_used taken from the ledger by FIFO; only this is restored.
    fifo_consumed = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    prepaid = models.ForeignKey(
        'clients.Prepaid',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='sales'
    )
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=10,
        choices=SaleStatus.choices,
        default=SaleStatus.PENDING
    )
    notes = models.TextField(blank=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='sales_status_idx'),
            models.Index(fields=['payment_method'], name='sales_payment_method_idx'),
            models.Index(fields=['client', 'created_at'], name='sales_client_created_idx'),
        ]

    def __str__(self):
        return f"{self.sale_number} ({self.status})"


class SaleItem(TimeStampedModel):
    """One priced line; product_name is a snapshot taken at sale time."""

    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='sale_items'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'sale_items'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['sale'], name='sale_items_sale_idx'),
            models.Index(fields=['product'], name='sale_items_product_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"
