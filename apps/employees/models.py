from django.db import models
from django.db.models import Q

from apps.common.models import SoftDeleteModel


class EmployeeRole(models.TextChoices):
    MANAGER = 'manager', 'Manager'
    CASHIER = 'cashier', 'Cashier'
    WAITER = 'waiter', 'Waiter'


class Employee(SoftDeleteModel):
    """Staff member record. Not a login account."""

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255)
    role = models.CharField(max_length=20, choices=EmployeeRole.choices)
    phone = models.CharField(max_length=20, blank=True)
    address = models.CharField(max_length=255, blank=True)
    start_date = models.DateField()

    class Meta:
        db_table = 'employees'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=Q(deleted_at__isnull=True),
                name='unique_active_employee_email',
            ),
        ]
        indexes = [
            models.Index(fields=['role'], name='employees_role_idx'),
            models.Index(fields=['start_date'], name='employees_start_date_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_role_display()})"
