# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# Mirrors users.models.User.ROLE_CHOICES.
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_CASHIER = "cashier"
ROLE_STOCK_KEEPER = "stock_keeper"
ROLE_VIEWER = "viewer"


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"        # add stock / delete stock entries

CAP_SALES_VIEW = "sales.view"
CAP_SALES_RECORD = "sales.record"
CAP_SALES_REVERSE = "sales.reverse"          # delete a recorded sale (reversal)

CAP_CUSTOMERS_EDIT = "customers.edit"

CAP_LEDGER_VIEW = "ledger.view"
CAP_LEDGER_MANAGE = "ledger.manage"          # manual refresh, outbox inspection
CAP_LEDGER_WITHDRAW = "ledger.withdraw"      # propose / confirm cash withdrawals

CAP_USERS_MANAGE = "users.manage"            # assign staff roles

ALL_CAPABILITIES = {
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
    CAP_SALES_VIEW,
    CAP_SALES_RECORD,
    CAP_SALES_REVERSE,
    CAP_CUSTOMERS_EDIT,
    CAP_LEDGER_VIEW,
    CAP_LEDGER_MANAGE,
    CAP_LEDGER_WITHDRAW,
    CAP_USERS_MANAGE,
}


# =========================================================
# ROLE -> CAPABILITY MAP (DEFAULT)
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
        CAP_SALES_VIEW,
        CAP_SALES_RECORD,
        CAP_SALES_REVERSE,
        CAP_CUSTOMERS_EDIT,
        CAP_LEDGER_VIEW,
        CAP_LEDGER_MANAGE,
        # withdrawals stay admin-only
    },
    ROLE_CASHIER: {
        CAP_INVENTORY_VIEW,
        CAP_SALES_VIEW,
        CAP_SALES_RECORD,
        CAP_CUSTOMERS_EDIT,
    },
    ROLE_STOCK_KEEPER: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
    },
    ROLE_VIEWER: {
        CAP_INVENTORY_VIEW,
        CAP_SALES_VIEW,
        CAP_LEDGER_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_LEDGER_WITHDRAW
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # If not set, deny-by-default to avoid accidental open endpoints
            return False

        return user_has_capability(request.user, required)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_SALES_VIEW, CAP_LEDGER_VIEW}
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        return any(user_has_capability(request.user, cap) for cap in set(required))

