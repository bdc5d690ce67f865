from django.contrib import admin
from .models import Client, Prepaid


class PrepaidInline(admin.TabularInline):
    """Prepaids are read-only here; they move through sales."""
    model = Prepaid
    extra = 0
    fields = ['amount', 'status', 'consumed_at', 'notes', 'deleted_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'cuit', 'created_at', 'deleted_at']
    search_fields = ['full_name', 'email', 'phone', 'cuit']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at', 'deleted_at']
    inlines = [PrepaidInline]


@admin.register(Prepaid)
class PrepaidAdmin(admin.ModelAdmin):
    list_display = ['client', 'amount', 'status', 'consumed_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['client__full_name', 'client__email', 'notes']
    readonly_fields = ['amount', 'status', 'consumed_at', 'created_at', 'updated_at', 'deleted_at']
