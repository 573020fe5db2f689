"""
Contact Permissions
"""
from rest_framework import permissions

from .authentication import AdminPrincipal


class HasAdminToken(permissions.BasePermission):
    """
    Permission for the admin contact API.

    Only requests authenticated by AdminTokenAuthentication pass.
    """

    def has_permission(self, request, view):
        return isinstance(request.user, AdminPrincipal)
