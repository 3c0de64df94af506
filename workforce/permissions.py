"""
Role based permission classes for the user management API.
"""
from rest_framework.permissions import BasePermission

from .models import Role


class IsAdminRole(BasePermission):
    """Allow access only to administrators (or Django superusers)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return bool(getattr(user, "is_superuser", False) or getattr(user, "role", None) == Role.ADMIN)

