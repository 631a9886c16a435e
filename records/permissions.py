"""
DRF permission classes backed by :mod:`records.policy`.
"""
from rest_framework.permissions import BasePermission

from .policy import Operation, is_allowed


def allows(**operations: Operation):
    """Build a permission class mapping HTTP methods to policy operations.

    ``allows(GET=Operation.LIST_LAB_ORDERS, POST=Operation.CREATE_LAB_ORDER)``
    """
    table = {method.upper(): op for method, op in operations.items()}

    class PolicyPermission(BasePermission):
        message = 'Forbidden: insufficient permissions'

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            user = getattr(request, 'user', None)
            if not (user and user.is_authenticated):
                return False
            op = table.get(request.method)
            if op is None:
                return False
            return is_allowed(getattr(user, 'role', None), op)

    PolicyPermission.__name__ = 'Allows_' + '_'.join(op.value for op in table.values())
    return PolicyPermission
