"""Role-based DRF permissions.

Two roles guard the API: ``viewer`` for read operations and ``admin`` for
mutating ones.  ``admin`` implies ``viewer``.  Role names come from
``settings.ROLE_VIEWER`` / ``settings.ROLE_ADMIN``.

Where roles come from:
- ``Auth0User``: the configured roles claim (``user.roles``).
- Django users (SimpleJWT / session): group names; superusers are admins.
"""

from __future__ import annotations

from typing import Any, FrozenSet

from django.conf import settings
from rest_framework.permissions import BasePermission


def get_user_roles(user: Any) -> FrozenSet[str]:
    if user is None or not getattr(user, "is_authenticated", False):
        return frozenset()

    roles = getattr(user, "roles", None)
    if roles is not None:
        return frozenset(roles)

    if getattr(user, "is_superuser", False):
        return frozenset({settings.ROLE_ADMIN})
    return frozenset(user.groups.values_list("name", flat=True))


class HasRole(BasePermission):
    """Grants access when the user holds any of ``allowed_roles``."""

    allowed_roles: FrozenSet[str] = frozenset()
    message = "You do not have the role required for this operation."

    def get_allowed_roles(self) -> FrozenSet[str]:
        return self.allowed_roles

    def has_permission(self, request, view) -> bool:
        return bool(get_user_roles(request.user) & self.get_allowed_roles())


class IsViewer(HasRole):
    def get_allowed_roles(self) -> FrozenSet[str]:
        return frozenset({settings.ROLE_VIEWER, settings.ROLE_ADMIN})


class IsAdmin(HasRole):
    def get_allowed_roles(self) -> FrozenSet[str]:
        return frozenset({settings.ROLE_ADMIN})
