"""Permission catalog with default scopes, restricted keys and duty rules.

All permission keys are defined here with a default scope and a description.
The catalog is built once at import time and never mutated.

Restricted system permissions are never granted through the admin role;
only the super-admin role (wildcard) holds them.
Unknown keys are simply absent from an effective set, never an error.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping
from uuid import UUID

ACCESS_CONTROL_VERSION = 1

WILDCARD_PERMISSION = "*"


class ScopeType(str, Enum):
    """Breadth of data a permission grants, broadest first."""

    GLOBAL = "GLOBAL"
    DEPARTMENT = "DEPARTMENT"
    ASSIGNED_ONLY = "ASSIGNED_ONLY"
    SELF_ONLY = "SELF_ONLY"


class CrossDepartmentAccess(str, Enum):
    """Read access a department has to inquiries routed through other departments."""

    NONE = "none"
    READ_ONLY = "read_only"
    MANAGED = "managed"


class PermissionKey(str, Enum):
    """Canonical permission keys."""

    # Personal inquiries
    INQUIRIES_CREATE = "inquiries.create"
    INQUIRIES_VIEW = "inquiries.view"

    # Department inquiry queues
    SUPPORT_INQUIRIES_VIEW = "support.inquiries.view"
    SUPPORT_INQUIRIES_REPLY = "support.inquiries.reply"
    SUPPORT_INQUIRIES_ASSIGN = "support.inquiries.assign"
    SUPPORT_INQUIRIES_ESCALATE = "support.inquiries.escalate"
    FINANCE_INQUIRIES_VIEW = "finance.inquiries.view"
    FINANCE_INQUIRIES_REPLY = "finance.inquiries.reply"
    FINANCE_INQUIRIES_MANAGE = "finance.inquiries.manage"
    MARKETING_INQUIRIES_VIEW = "marketing.inquiries.view"
    MARKETING_INQUIRIES_REPLY = "marketing.inquiries.reply"
    MARKETING_INQUIRIES_MANAGE = "marketing.inquiries.manage"
    DEPARTMENT_INQUIRIES_VIEW = "department.inquiries.view"
    DEPARTMENT_INQUIRIES_REPLY = "department.inquiries.reply"

    # Support tickets
    SUPPORT_TICKETS_VIEW = "support.tickets.view"
    SUPPORT_TICKETS_REPLY = "support.tickets.reply"
    SUPPORT_TICKETS_ASSIGN = "support.tickets.assign"
    SUPPORT_TICKETS_CLOSE = "support.tickets.close"
    SUPPORT_TICKETS_ESCALATE = "support.tickets.escalate"

    # Creator relations and content
    AUTHOR_REQUESTS_VIEW = "author.requests.view"
    AUTHOR_REQUESTS_MANAGE = "author.requests.manage"
    AUTHOR_VERIFY = "author.verify"
    BLOGS_MODERATE = "blogs.moderate"
    BLOGS_FEATURE = "blogs.feature"
    BLOGS_UNPUBLISH = "blogs.unpublish"
    CATALOG_MANAGE = "catalog.manage"
    METADATA_MANAGE = "metadata.manage"
    PUBLISHER_REQUESTS_MANAGE = "publisher.requests.manage"

    # Business and legal
    BUSINESS_INQUIRIES_VIEW = "business.inquiries.view"
    BUSINESS_INQUIRIES_MANAGE = "business.inquiries.manage"
    CAMPAIGN_VIEW = "campaign.view"
    LEGAL_INQUIRIES_VIEW = "legal.inquiries.view"
    LEGAL_INQUIRIES_MANAGE = "legal.inquiries.manage"
    SECURITY_INCIDENTS_MANAGE = "security.incidents.manage"

    # Finance
    FINANCE_REPORTS_VIEW = "finance.reports.view"
    FINANCE_PAYOUT_MANAGE = "finance.payout.manage"
    FINANCE_AUDIT_VIEW = "finance.audit.view"
    FINANCE_TRANSACTION_EXPORT = "finance.transaction.export"

    # Warehouse
    WAREHOUSE_VIEW = "warehouse.view"
    WAREHOUSE_STOCK_UPDATE = "warehouse.stock.update"
    WAREHOUSE_TRANSFER = "warehouse.transfer"
    WAREHOUSE_STOCK_AUDIT = "warehouse.stock.audit"
    WAREHOUSE_DAMAGE_REPORT = "warehouse.damage.report"

    # Staff and HR
    STAFF_VIEW = "staff.view"
    STAFF_MANAGE = "staff.manage"
    HR_STAFF_CREATE = "hr.staff.create"
    HR_STAFF_UPDATE = "hr.staff.update"
    HR_PERFORMANCE_MANAGE = "hr.performance.manage"
    HR_ROLE_ASSIGN = "hr.role.assign"
    HR_DEPARTMENT_ASSIGN = "hr.department.assign"

    # System administration
    ADMIN_IMPERSONATE = "admin.impersonate"
    ADMIN_PERMISSION_MANAGE = "admin.permission.manage"
    ADMIN_ROLE_PROMOTE = "admin.role.promote"
    ADMIN_ACCOUNT_DISABLE = "admin.account.disable"
    ADMIN_AUDIT_GOVERNANCE_VIEW = "admin.audit.governance.view"


P = PermissionKey


@dataclass(frozen=True)
class PermissionDefinition:
    """Permission definition with its default scope."""

    key: str
    default_scope: ScopeType
    description: str


@dataclass(frozen=True)
class SeparationOfDutyRule:
    """The actor who performed ``actor_action`` may not also perform the blocked action."""

    id: str
    actor_action: str
    blocked_when_same_actor_action: str
    description: str


def _define(key: PermissionKey, scope: ScopeType, description: str) -> PermissionDefinition:
    return PermissionDefinition(key=key.value, default_scope=scope, description=description)


# =============================================================================
# Permission Catalog
# =============================================================================

_CATALOG: tuple[PermissionDefinition, ...] = (
    _define(P.INQUIRIES_CREATE, ScopeType.SELF_ONLY, "Create personal inquiries"),
    _define(P.INQUIRIES_VIEW, ScopeType.SELF_ONLY, "View personal inquiries"),
    _define(P.SUPPORT_INQUIRIES_VIEW, ScopeType.DEPARTMENT, "View support inquiries in department queue"),
    _define(P.SUPPORT_INQUIRIES_REPLY, ScopeType.DEPARTMENT, "Reply to support inquiries"),
    _define(P.SUPPORT_INQUIRIES_ASSIGN, ScopeType.DEPARTMENT, "Assign support inquiries"),
    _define(P.SUPPORT_INQUIRIES_ESCALATE, ScopeType.DEPARTMENT, "Escalate support inquiries"),
    _define(P.FINANCE_INQUIRIES_VIEW, ScopeType.DEPARTMENT, "View finance inquiries in department queue"),
    _define(P.FINANCE_INQUIRIES_REPLY, ScopeType.DEPARTMENT, "Reply to finance inquiries"),
    _define(P.FINANCE_INQUIRIES_MANAGE, ScopeType.DEPARTMENT, "Manage finance inquiries"),
    _define(P.MARKETING_INQUIRIES_VIEW, ScopeType.DEPARTMENT, "View marketing inquiries in department queue"),
    _define(P.MARKETING_INQUIRIES_REPLY, ScopeType.DEPARTMENT, "Reply to marketing inquiries"),
    _define(P.MARKETING_INQUIRIES_MANAGE, ScopeType.DEPARTMENT, "Manage marketing inquiries"),
    _define(P.DEPARTMENT_INQUIRIES_VIEW, ScopeType.ASSIGNED_ONLY, "View assigned departmental inquiries"),
    _define(P.DEPARTMENT_INQUIRIES_REPLY, ScopeType.ASSIGNED_ONLY, "Reply to assigned departmental inquiries"),
    _define(P.SUPPORT_TICKETS_VIEW, ScopeType.DEPARTMENT, "View support tickets in own queue"),
    _define(P.SUPPORT_TICKETS_REPLY, ScopeType.ASSIGNED_ONLY, "Reply to assigned support tickets"),
    _define(P.SUPPORT_TICKETS_ASSIGN, ScopeType.DEPARTMENT, "Assign tickets within department queue"),
    _define(P.SUPPORT_TICKETS_CLOSE, ScopeType.ASSIGNED_ONLY, "Close assigned support tickets"),
    _define(P.SUPPORT_TICKETS_ESCALATE, ScopeType.DEPARTMENT, "Escalate support tickets"),
    _define(P.AUTHOR_REQUESTS_VIEW, ScopeType.DEPARTMENT, "View creator onboarding requests"),
    _define(P.AUTHOR_REQUESTS_MANAGE, ScopeType.DEPARTMENT, "Process creator onboarding requests"),
    _define(P.AUTHOR_VERIFY, ScopeType.DEPARTMENT, "Verify creator identity/status"),
    _define(P.BLOGS_MODERATE, ScopeType.DEPARTMENT, "Moderate blog content"),
    _define(P.BLOGS_FEATURE, ScopeType.DEPARTMENT, "Feature blog content"),
    _define(P.BLOGS_UNPUBLISH, ScopeType.DEPARTMENT, "Unpublish blog content"),
    _define(P.CATALOG_MANAGE, ScopeType.DEPARTMENT, "Manage catalog entries"),
    _define(P.METADATA_MANAGE, ScopeType.DEPARTMENT, "Manage metadata quality and corrections"),
    _define(P.PUBLISHER_REQUESTS_MANAGE, ScopeType.DEPARTMENT, "Handle publisher requests"),
    _define(P.BUSINESS_INQUIRIES_VIEW, ScopeType.DEPARTMENT, "View business inquiries"),
    _define(P.BUSINESS_INQUIRIES_MANAGE, ScopeType.DEPARTMENT, "Manage business inquiries"),
    _define(P.CAMPAIGN_VIEW, ScopeType.DEPARTMENT, "View campaign-level data"),
    _define(P.LEGAL_INQUIRIES_VIEW, ScopeType.DEPARTMENT, "View legal inquiries"),
    _define(P.LEGAL_INQUIRIES_MANAGE, ScopeType.DEPARTMENT, "Manage legal inquiries"),
    _define(P.SECURITY_INCIDENTS_MANAGE, ScopeType.DEPARTMENT, "Handle security incidents"),
    _define(P.FINANCE_REPORTS_VIEW, ScopeType.GLOBAL, "View finance and order reports"),
    _define(P.FINANCE_PAYOUT_MANAGE, ScopeType.GLOBAL, "Manage payout actions"),
    _define(P.FINANCE_AUDIT_VIEW, ScopeType.GLOBAL, "Read finance audit trails"),
    _define(P.FINANCE_TRANSACTION_EXPORT, ScopeType.GLOBAL, "Export finance transaction data"),
    _define(P.WAREHOUSE_VIEW, ScopeType.DEPARTMENT, "View warehouse operations"),
    _define(P.WAREHOUSE_STOCK_UPDATE, ScopeType.DEPARTMENT, "Update stock in assigned warehouses"),
    _define(P.WAREHOUSE_TRANSFER, ScopeType.DEPARTMENT, "Transfer stock between assigned warehouses"),
    _define(P.WAREHOUSE_STOCK_AUDIT, ScopeType.DEPARTMENT, "Read stock adjustment audit logs"),
    _define(P.WAREHOUSE_DAMAGE_REPORT, ScopeType.DEPARTMENT, "Report damaged inventory"),
    _define(P.STAFF_VIEW, ScopeType.DEPARTMENT, "View staff and assignment records"),
    _define(P.STAFF_MANAGE, ScopeType.DEPARTMENT, "Manage staff operational records"),
    _define(P.HR_STAFF_CREATE, ScopeType.DEPARTMENT, "Create staff profile"),
    _define(P.HR_STAFF_UPDATE, ScopeType.DEPARTMENT, "Update staff profile"),
    _define(P.HR_PERFORMANCE_MANAGE, ScopeType.DEPARTMENT, "Manage staff performance tasks"),
    _define(P.HR_ROLE_ASSIGN, ScopeType.DEPARTMENT, "Assign roles to staff in scope"),
    _define(P.HR_DEPARTMENT_ASSIGN, ScopeType.DEPARTMENT, "Reassign department in scope"),
    _define(P.ADMIN_IMPERSONATE, ScopeType.GLOBAL, "Impersonate users for debugging with audit trail"),
)

PERMISSION_REGISTRY: Mapping[str, PermissionDefinition] = MappingProxyType(
    {definition.key: definition for definition in _CATALOG}
)

# Never granted through the admin role, regardless of department
RESTRICTED_SYSTEM_PERMISSIONS: frozenset[str] = frozenset(
    {
        P.ADMIN_PERMISSION_MANAGE.value,
        P.ADMIN_ROLE_PROMOTE.value,
        P.ADMIN_ACCOUNT_DISABLE.value,
        P.ADMIN_AUDIT_GOVERNANCE_VIEW.value,
        P.ADMIN_IMPERSONATE.value,
    }
)

CROSS_DEPARTMENT_ACCESS: Mapping[str, CrossDepartmentAccess] = MappingProxyType(
    {
        "support": CrossDepartmentAccess.NONE,
        "author": CrossDepartmentAccess.NONE,
        "publisher": CrossDepartmentAccess.NONE,
        "business": CrossDepartmentAccess.NONE,
        "legal": CrossDepartmentAccess.NONE,
        "finance": CrossDepartmentAccess.READ_ONLY,
        "warehouse": CrossDepartmentAccess.NONE,
        "hr": CrossDepartmentAccess.NONE,
        "admin": CrossDepartmentAccess.MANAGED,
    }
)

SEPARATION_OF_DUTY_RULES: tuple[SeparationOfDutyRule, ...] = (
    SeparationOfDutyRule(
        id="payout-create-approve-split",
        actor_action="finance.payout.create",
        blocked_when_same_actor_action="finance.payout.approve",
        description="The same actor cannot create and approve the same payout.",
    ),
    SeparationOfDutyRule(
        id="role-create-approve-split",
        actor_action="admin.role.create",
        blocked_when_same_actor_action="admin.role.approve",
        description="The same actor cannot create and approve role elevation.",
    ),
    SeparationOfDutyRule(
        id="performance-self-approval",
        actor_action="hr.performance.review.create",
        blocked_when_same_actor_action="hr.performance.review.approve",
        description="A staff member cannot approve their own performance review outcome.",
    ),
)


# =============================================================================
# Helper Functions
# =============================================================================

def list_permissions() -> list[PermissionDefinition]:
    """All catalog permissions in declaration order."""
    return list(_CATALOG)


def get_permission(key: str) -> PermissionDefinition | None:
    """Get permission by key."""
    return PERMISSION_REGISTRY.get(key)


def is_known_permission(key: str) -> bool:
    """Check if permission key exists in the catalog."""
    return key in PERMISSION_REGISTRY


def is_restricted_system_permission(key: str) -> bool:
    """Restricted keys require the super-admin role specifically."""
    return key in RESTRICTED_SYSTEM_PERMISSIONS


def grantable_to_admin() -> frozenset[str]:
    """Catalog keys held by the admin role."""
    return frozenset(key for key in PERMISSION_REGISTRY if key not in RESTRICTED_SYSTEM_PERMISSIONS)


def cross_department_access(department_prefix: str | None) -> CrossDepartmentAccess:
    """Cross-department read policy for a department prefix (unknown prefix -> none)."""
    if not department_prefix:
        return CrossDepartmentAccess.NONE
    return CROSS_DEPARTMENT_ACCESS.get(department_prefix.lower(), CrossDepartmentAccess.NONE)


def find_separation_rule(action: str) -> SeparationOfDutyRule | None:
    """Rule whose blocked action is ``action``, if any."""
    for rule in SEPARATION_OF_DUTY_RULES:
        if rule.blocked_when_same_actor_action == action:
            return rule
    return None


def is_blocked(
    actor_id: UUID | str,
    prior_action_actor_id: UUID | str | None,
    rule: SeparationOfDutyRule | None,
) -> bool:
    """
    Check a separation-of-duty rule.

    ``prior_action_actor_id`` is whoever performed ``rule.actor_action`` on the
    entity. Blocked when that was the same actor now attempting the blocked action.
    """
    if rule is None or prior_action_actor_id is None:
        return False
    return str(actor_id) == str(prior_action_actor_id)
