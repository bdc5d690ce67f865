from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""

    list_display = ['timestamp', 'action', 'entity', 'entity_id', 'user_email', 'ip_address']
    list_filter = ['action', 'entity', 'timestamp']
    search_fields = ['entity_id', 'user_email', 'entity']
    date_hierarchy = 'timestamp'
    ordering = ['-timestamp']
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
