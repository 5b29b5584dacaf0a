"""Role gate for DRF views."""

from rest_framework.permissions import BasePermission

from bongoexpress.exceptions import Forbidden


def require_role(*roles):
    """
    Build a permission class admitting only authenticated users whose role is in `roles`.

        permission_classes = [require_role("staff", "admin")]
    """

    class HasRole(BasePermission):
        message = Forbidden.default_detail
        allowed = frozenset(roles)

        def has_permission(self, request, view):
            user = request.user
            return bool(user and user.is_authenticated and user.role in self.allowed)

    HasRole.__name__ = "HasRole_" + "_".join(roles)
    return HasRole


IsAdmin        = require_role("admin")
IsStaffOrAdmin = require_role("staff", "admin")
