"""
Permission classes and owner checks.

There is no role hierarchy: a request is either anonymous or carries a
session user, and writes to someone else's profile are refused.
"""
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsSessionUser(BasePermission):
    """Require a logged-in session user."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated)


class ReadOnlyOrSessionUser(BasePermission):
    """Anyone may read; writes need a session user."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return True
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated)


def ensure_self(request, user_id: int) -> None:
    """Raise 403 unless the session user is ``user_id``."""
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated) or user.id != user_id:
        raise PermissionDenied("You can only modify your own profile")
