from enum import Enum


class RoleLevel:
    """Lower number = more privileged."""
    SUPERUSER = 1
    ADMIN = 2
    MANAGER = 3
    EMPLOYEE = 4


class Permission(str, Enum):
    manage_company = "manage_company"
    view_company = "view_company"

    create_users = "create_users"
    manage_users = "manage_users"
    view_users = "view_users"
    delete_users = "delete_users"

    create_employees = "create_employees"
    manage_employees = "manage_employees"
    view_employees = "view_employees"
    delete_employees = "delete_employees"

    change_employment_status = "change_employment_status"
    view_employment_status = "view_employment_status"

    generate_contracts = "generate_contracts"
    manage_contracts = "manage_contracts"
    view_contracts = "view_contracts"
    delete_contracts = "delete_contracts"

    manage_templates = "manage_templates"
    view_templates = "view_templates"

    manage_departments = "manage_departments"
    view_departments = "view_departments"

    manage_settings = "manage_settings"
    view_settings = "view_settings"

    view_analytics = "view_analytics"
    view_reports = "view_reports"

    view_own_profile = "view_own_profile"
    edit_own_profile = "edit_own_profile"


P = Permission

ROLE_PERMISSIONS: dict[str, list[Permission]] = {
    "superuser": list(Permission),
    "admin": [
        P.view_company,
        P.create_users, P.manage_users, P.view_users,
        P.create_employees, P.manage_employees, P.view_employees, P.delete_employees,
        P.change_employment_status, P.view_employment_status,
        P.generate_contracts, P.manage_contracts, P.view_contracts,
        P.manage_templates, P.view_templates,
        P.manage_departments, P.view_departments,
        P.view_settings,
        P.view_analytics, P.view_reports,
        P.view_own_profile, P.edit_own_profile,
    ],
    "manager": [
        P.create_employees, P.view_employees,
        P.change_employment_status, P.view_employment_status,
        P.generate_contracts, P.view_contracts,
        P.view_templates,
        P.view_departments,
        P.view_reports,
        P.view_own_profile, P.edit_own_profile,
    ],
    "employee": [
        P.view_own_profile, P.edit_own_profile,
        P.view_departments,
    ],
}

DEFAULT_ROLES = [
    ("superuser", "Full access to the company account", RoleLevel.SUPERUSER),
    ("admin", "Manages users, employees, templates and departments", RoleLevel.ADMIN),
    ("manager", "Onboards employees and generates contracts", RoleLevel.MANAGER),
    ("employee", "Own profile only", RoleLevel.EMPLOYEE),
]


def has_permission(role_name: str, permission: str) -> bool:
    perms = ROLE_PERMISSIONS.get(role_name)
    return perms is not None and permission in perms


def has_role_level(user_level: int, required_level: int) -> bool:
    return user_level <= required_level
