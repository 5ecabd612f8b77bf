"""
Role based permission classes.

Roles live on ``User.role``; there is no finer permission matrix.
"""
from rest_framework.permissions import BasePermission

from .models import User


class IsAdminRole(BasePermission):
    """Allow access only to users with the admin role."""
    message = 'هذه العملية متاحة لمدير النظام فقط'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == User.ROLE_ADMIN)


class IsTechnicianOrAdmin(BasePermission):
    """Biomedical technicians, plus admins who can act on their behalf."""
    message = 'هذه العملية متاحة للفنيين فقط'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(
            user and user.is_authenticated
            and getattr(user, "role", None) in {User.ROLE_TECHNICIAN, User.ROLE_ADMIN}
        )


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "role", None) == User.ROLE_ADMIN)
