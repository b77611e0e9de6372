"""
Role-based permission classes shared by the ledger apps.

Sellers can register credits and take payments; only admins may rewrite
or delete ledger records and configure payment methods.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsLedgerAdmin(BasePermission):
    """
    Allow access only to admin or superadmin staff.

    Usage:
        def get_permissions(self):
            if self.action in ['update', 'partial_update', 'destroy']:
                return [IsAuthenticated(), IsLedgerAdmin()]
            return super().get_permissions()
    """

    message = 'Administrator role required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_ledger_admin)


class IsLedgerAdminOrReadOnly(IsLedgerAdmin):
    """Read access for any authenticated user, writes for admins."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)
