from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils import timezone
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for back-office users.

    Deletion is soft: the delete action sets deleted_at and deactivates.
    """

    list_display = ['email', 'name', 'role', 'is_active', 'deleted_at', 'created_at', 'last_login']
    list_filter = ['role', 'is_active', 'is_staff', 'created_at']
    search_fields = ['email', 'name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'name', 'avatar', 'password')
        }),
        ('Permissions', {
            'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'last_login', 'deleted_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login', 'deleted_at']
    filter_horizontal = ['groups', 'user_permissions']
    actions = ['soft_delete_users']

    @admin.action(description='Soft delete selected users')
    def soft_delete_users(self, request, queryset):
        """Soft delete selected users (excludes superusers for safety)."""
        safe_queryset = queryset.filter(is_superuser=False, deleted_at__isnull=True)
        count = safe_queryset.update(deleted_at=timezone.now(), is_active=False)
        self.message_user(request, f'Deleted {count} user(s).')
