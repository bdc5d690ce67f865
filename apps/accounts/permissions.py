from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """
    Permission: User must have the admin role.
    """

    message = 'Admin role required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
