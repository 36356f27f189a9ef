"""
Custom permissions for role-based access
"""
from rest_framework import permissions


class IsSuperAdmin(permissions.BasePermission):
    """Platform operators only"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_super_admin
        )


class IsOrgAdmin(permissions.BasePermission):
    """Organization admins (super admins pass too)"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_org_admin
        )


class IsSuperAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read (public catalogue); only super admins may write"""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_super_admin
        )
