"""
RBAC (Role-Based Access Control) permission system
"""

from enum import Enum
from typing import Set
from fastapi import HTTPException, status

from tableside.models.order import OrderStatus


class Permission(str, Enum):
    """Permission definitions"""
    # Order permissions
    ORDER_CREATE = "order:create"
    ORDER_ADVANCE_KITCHEN = "order:advance_kitchen"
    ORDER_SETTLE = "order:settle"

    # Menu permissions
    MENU_EDIT = "menu:edit"

    # Table permissions
    TABLES_EDIT = "tables:edit"

    # Report permissions
    REPORTS_VIEW = "reports:view"


# Role permission mapping
ROLE_PERMISSIONS = {
    "admin": {
        # Admins have all permissions
        Permission.ORDER_CREATE,
        Permission.ORDER_ADVANCE_KITCHEN,
        Permission.ORDER_SETTLE,
        Permission.MENU_EDIT,
        Permission.TABLES_EDIT,
        Permission.REPORTS_VIEW,
    },
    "staff": {
        # Floor and kitchen staff run the order pipeline but do not edit layouts
        Permission.ORDER_CREATE,
        Permission.ORDER_ADVANCE_KITCHEN,
        Permission.ORDER_SETTLE,
        Permission.REPORTS_VIEW,
    },
    "customer": {
        # Customers order from their table and pay the bill
        Permission.ORDER_CREATE,
        Permission.ORDER_SETTLE,
    },
}


# Permission needed to move an order *into* a status
TRANSITION_PERMISSIONS = {
    OrderStatus.UNDER_PROCESS: Permission.ORDER_ADVANCE_KITCHEN,
    OrderStatus.SERVED: Permission.ORDER_ADVANCE_KITCHEN,
    OrderStatus.COMPLETED: Permission.ORDER_ADVANCE_KITCHEN,
    OrderStatus.PAID: Permission.ORDER_SETTLE,
}


def get_permissions_for_role(role: str) -> Set[Permission]:
    """Get permissions for a given role"""
    return ROLE_PERMISSIONS.get((role or "").lower(), set())


def has_permission(required_permission: Permission, user_permissions: Set[Permission]) -> bool:
    """Check if user has required permission"""
    return required_permission in user_permissions


def required_permission_for(requested_status: OrderStatus) -> Permission:
    """Permission needed to request a status change.

    ``placed`` is only ever entered by creating an order, so asking for it
    falls under order creation; the state machine rejects the transition itself.
    """
    return TRANSITION_PERMISSIONS.get(requested_status, Permission.ORDER_CREATE)


def ensure_permission(role: str, required_permission: Permission) -> None:
    """Raise 403 unless the role grants the permission"""
    if not has_permission(required_permission, get_permissions_for_role(role)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission required: {required_permission.value}",
        )
