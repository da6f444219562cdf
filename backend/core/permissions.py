"""
Permission classes for role-based access control.

Role is read from request.user (authenticated via JWT).
Role is NEVER read from request body, query parameters, or headers.
"""

from rest_framework import permissions


def _has_role(request, *roles):
    if not request.user or not request.user.is_authenticated:
        return False

    if not hasattr(request.user, "role"):
        return False

    return request.user.role in roles


class IsDeveloper(permissions.BasePermission):
    """Allow DEVELOPER role only."""

    message = "Access denied"

    def has_permission(self, request, view):
        return _has_role(request, "developer")


class IsSocietyAdmin(permissions.BasePermission):
    """Allow SOCIETY_ADMIN role, scoped to the society in the URL when present."""

    message = "Access denied"

    def has_permission(self, request, view):
        if not _has_role(request, "society_admin"):
            return False

        society_id = view.kwargs.get("societyId") if view else None
        if society_id is None:
            return True

        return str(request.user.society_id) == str(society_id)
