"""Role-based access control."""
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    FARM_OWNER = "farm_owner"
    MANAGER = "manager"
    STAFF = "staff"
    CUSTOMER = "customer"


ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.ADMIN: "Platform administrator",
    Role.FARM_OWNER: "Farm owner",
    Role.MANAGER: "Farm manager",
    Role.STAFF: "Farm staff",
    Role.CUSTOMER: "Marketplace customer",
}


def _has_any(roles: list[str], allowed: set[Role]) -> bool:
    names = {a.value for a in allowed}
    return any(r.lower() in names for r in roles)


def can_edit_assumptions(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER, Role.MANAGER})


def can_view_financials(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER, Role.MANAGER, Role.STAFF})


def can_record_transactions(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER, Role.MANAGER, Role.STAFF})


def can_delete_transactions(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER, Role.MANAGER})


def can_create_farm(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER})


def can_manage_members(roles: list[str]) -> bool:
    return _has_any(roles, {Role.ADMIN, Role.FARM_OWNER})
