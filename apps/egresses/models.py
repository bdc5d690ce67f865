from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MinLengthValidator
from django.db import models

from apps.common.models import SoftDeleteModel


class EgressType(models.TextChoices):
    WITHDRAWAL = 'WITHDRAWAL', 'Withdrawal'
    EXPENSE = 'EXPENSE', 'Expense'
    REFUND = 'REFUND', 'Refund'
    TRANSFER = 'TRANSFER', 'Transfer'
    OTHER = 'OTHER', 'Other'


class EgressStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


class Currency(models.TextChoices):
    USD = 'USD', 'US Dollar'
    ARS = 'ARS', 'Argentine Peso'


class Egress(SoftDeleteModel):
    """Money leaving the till: withdrawals, expenses, refunds."""

    egress_number = models.CharField(max_length=20, unique=True)
    concept = models.CharField(max_length=255, validators=[MinLengthValidator(3)])
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    type = models.CharField(max_length=12, choices=EgressType.choices)
    status = models.CharField(
        max_length=10,
        choices=EgressStatus.choices,
        default=EgressStatus.PENDING
    )
    notes = models.TextField(blank=True)
    authorized_by = models.CharField(max_length=100, blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='egresses'
    )

    class Meta:
        db_table = 'egresses'
        ordering = ['-created_at']
        verbose_name_plural = 'egresses'
        indexes = [
            models.Index(fields=['status'], name='egresses_status_idx'),
            models.Index(fields=['type'], name='egresses_type_idx'),
            models.Index(fields=['currency', 'status'], name='egresses_currency_status_idx'),
        ]

    def __str__(self):
        return f"{self.egress_number} {self.amount} {self.currency}"
