from decimal import Decimal

from django.core.validators import MinValueValidator, MinLengthValidator
from django.db import models
from django.db.models import Q

from apps.common.models import SoftDeleteModel


class Client(SoftDeleteModel):
    """
    Customer that may hold prepaid credit.

    email and cuit are optional; when present they are unique among
    non-deleted clients (stored as NULL when absent).
    """

    full_name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(max_length=255, null=True, blank=True)
    cuit = models.CharField(max_length=13, null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = 'clients'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=Q(deleted_at__isnull=True, email__isnull=False),
                name='unique_active_client_email',
            ),
            models.UniqueConstraint(
                fields=['cuit'],
                condition=Q(deleted_at__isnull=True, cuit__isnull=False),
                name='unique_active_client_cuit',
            ),
        ]
        indexes = [
            models.Index(fields=['full_name'], name='clients_full_name_idx'),
        ]

    def __str__(self):
        return self.full_name


class PrepaidStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    CONSUMED = 'CONSUMED', 'Consumed'


class Prepaid(SoftDeleteModel):
    """
    One chunk of prepaid credit owned by a client.

    A PENDING record is spendable. Partial consumption splits a record:
    the original keeps the remainder and a new CONSUMED record carries
    the spent part, so the client's total never changes.
    """

    client = models.ForeignKey(
        Client,
        on_delete=models.PROTECT,
        related_name='prepaids'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    status = models.CharField(
        max_length=10,
        choices=PrepaidStatus.choices,
        default=PrepaidStatus.PENDING
    )
    consumed_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = 'prepaids'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['client', 'status'], name='prepaids_client_status_idx'),
            models.Index(fields=['status'], name='prepaids_status_idx'),
        ]

    def __str__(self):
        return f"{self.client} {self.amount} ({self.status})"
