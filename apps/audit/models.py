from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
import uuid


class AuditAction(models.TextChoices):
    CREATE = 'CREATE', 'Create'
    UPDATE = 'UPDATE', 'Update'
    DELETE = 'DELETE', 'Delete'
    UPDATE_STOCK = 'UPDATE_STOCK', 'Update stock'


class AuditLog(models.Model):
    """
    Append-only record of a successful mutation.

    The actor is stored by id/email rather than by foreign key so entries
    survive user deletion.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64, blank=True)
    action = models.CharField(max_length=20, choices=AuditAction.choices)

    user_id = models.UUIDField(null=True, blank=True)
    user_email = models.EmailField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    new_values = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['entity', 'entity_id'], name='audit_logs_entity_7c1e2a_idx'),
            models.Index(fields=['user_id'], name='audit_logs_user_id_3f0b9d_idx'),
            models.Index(fields=['timestamp'], name='audit_logs_timesta_a2d4c8_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.entity} {self.entity_id}"
