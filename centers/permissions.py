"""
Permission classes for role and permission based access control.

Views declare their gate as an ordered list, e.g.
``[IsActivePrincipal, IsCenterAdmin, permission_required(Permission.MANAGE_TESTS)]``.
DRF evaluates the list in order and the first failing class ends the
request: 401 for a missing principal, 403 for a role or permission
mismatch.
"""
from __future__ import annotations

import logging

from rest_framework.permissions import BasePermission

from centers.exceptions import FORBIDDEN_MESSAGE, NO_TOKEN_MESSAGE, Forbidden, Unauthenticated
from centers.models import Role

logger = logging.getLogger(__name__)


class IsActivePrincipal(BasePermission):
    """An authenticated, active user is attached to the request."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            raise Unauthenticated(NO_TOKEN_MESSAGE)
        if not user.is_active:
            raise Unauthenticated()
        return True


def role_required(*roles: str) -> type[BasePermission]:
    """Build a permission class admitting only the given roles."""
    allowed = frozenset(str(r) for r in roles)

    class HasRole(BasePermission):
        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            user = getattr(request, "user", None)
            role = getattr(user, "role", None)
            if role not in allowed:
                logger.info("Role %s denied for %s (allowed: %s)", role, request.path, sorted(allowed))
                raise Forbidden(FORBIDDEN_MESSAGE)
            return True

    HasRole.__name__ = "HasRole_" + "_".join(sorted(allowed))
    return HasRole


def permission_required(permission: str) -> type[BasePermission]:
    """Build a permission class requiring ``permission`` in the user's set."""
    name = str(permission)

    class HasPermission(BasePermission):
        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            user = getattr(request, "user", None)
            if user is None or not user.has_permission(name):
                logger.info("Permission %s missing for user %s", name, getattr(user, "pk", None))
                raise Forbidden(f"Access denied. Missing permission: {name}")
            return True

    HasPermission.__name__ = f"HasPermission_{name}"
    return HasPermission


IsPatient = role_required(Role.PATIENT)
IsCenterAdmin = role_required(Role.DIAGNOSTIC_CENTER_ADMIN)
