from django.contrib import admin
from .models import Egress


@admin.register(Egress)
class EgressAdmin(admin.ModelAdmin):
    list_display = ['egress_number', 'concept', 'amount', 'currency', 'type', 'status', 'created_at']
    list_filter = ['status', 'type', 'currency']
    search_fields = ['egress_number', 'concept', 'authorized_by']
    readonly_fields = ['egress_number', 'user', 'created_at', 'updated_at', 'deleted_at']
