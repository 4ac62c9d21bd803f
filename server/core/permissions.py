"""
Role based access control.

``authorize`` is the single capability check: it takes the authenticated
principal and the set of roles an operation requires and returns an
``AccessDecision``. The DRF permission classes below are thin wrappers around
it so views can declare their tier in ``permission_classes``.
"""
from dataclasses import dataclass

from rest_framework.permissions import BasePermission

GUEST = 'guest'
HOST = 'host'
ADMIN = 'admin'

HOSTING_ROLES = frozenset({HOST, ADMIN})
ADMIN_ROLES = frozenset({ADMIN})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str = ''

    def __bool__(self):
        return self.allowed


def authorize(principal, required_roles=None):
    """Decide whether ``principal`` may act with one of ``required_roles``.

    An empty or missing role set only requires an authenticated, active user.
    """
    if principal is None or not getattr(principal, 'is_authenticated', False):
        return AccessDecision(False, 'Authentication credentials were not provided.')
    if not principal.is_active:
        return AccessDecision(False, 'This account is inactive.')
    if required_roles and principal.role not in required_roles:
        wanted = ' or '.join(sorted(required_roles))
        return AccessDecision(False, f'Access denied. {wanted.capitalize()} rights required.')
    return AccessDecision(True)


class RolePermission(BasePermission):
    required_roles = frozenset()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            # Let DRF answer 401 rather than 403
            return False
        decision = authorize(user, self.required_roles)
        if not decision:
            self.message = decision.reason
        return decision.allowed


class IsHost(RolePermission):
    """Hosts and admins may manage listings."""
    required_roles = HOSTING_ROLES


class IsAdminRole(RolePermission):
    required_roles = ADMIN_ROLES
