from liquorpos.models.user import UserRole

_CASHIER = {"pos:sell", "inventory:view"}
_MANAGER = _CASHIER | {
    "inventory:manage",
    "reports:view",
    "expenses:manage",
    "settings:manage",
    "logs:view",
    "data:export",
}

ROLE_PERMISSIONS: dict[UserRole, set[str]] = {
    UserRole.ADMIN: _MANAGER | {"users:manage"},
    UserRole.MANAGER: _MANAGER,
    UserRole.CASHIER: _CASHIER,
}


def has_permission(role: UserRole, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, set())
