"""
Permission catalog tests.

Tests cover:
- Catalog lookups and default scopes
- Restricted system permissions never reach the admin role
- Cross-department access policy by department prefix
- Separation-of-duty rules
"""

import uuid

import pytest

from opsdesk.core.permissions import (
    PERMISSION_REGISTRY,
    RESTRICTED_SYSTEM_PERMISSIONS,
    CrossDepartmentAccess,
    PermissionKey,
    ScopeType,
    cross_department_access,
    find_separation_rule,
    get_permission,
    grantable_to_admin,
    is_blocked,
    is_known_permission,
    is_restricted_system_permission,
    list_permissions,
)
from opsdesk.core.policies import get_policy


# =============================================================================
# Catalog
# =============================================================================


def test_catalog_keys_are_unique_and_indexed():
    keys = [definition.key for definition in list_permissions()]
    assert len(keys) == len(set(keys))
    assert set(keys) == set(PERMISSION_REGISTRY)


def test_get_permission_returns_default_scope():
    definition = get_permission("support.inquiries.view")
    assert definition is not None
    assert definition.default_scope == ScopeType.DEPARTMENT

    assert get_permission("department.inquiries.reply").default_scope == ScopeType.ASSIGNED_ONLY
    assert get_permission("inquiries.view").default_scope == ScopeType.SELF_ONLY
    assert get_permission("finance.reports.view").default_scope == ScopeType.GLOBAL


def test_unknown_key_is_absent_not_an_error():
    assert get_permission("not.a.permission") is None
    assert is_known_permission("not.a.permission") is False
    assert is_known_permission(PermissionKey.STAFF_VIEW.value) is True


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        PERMISSION_REGISTRY["new.key"] = None  # type: ignore[index]


# =============================================================================
# Restricted permissions
# =============================================================================


def test_restricted_permissions():
    assert is_restricted_system_permission("admin.permission.manage")
    assert is_restricted_system_permission("admin.impersonate")
    assert not is_restricted_system_permission("support.inquiries.view")


def test_admin_grant_excludes_restricted_keys():
    granted = grantable_to_admin()
    assert granted.isdisjoint(RESTRICTED_SYSTEM_PERMISSIONS)
    assert "support.inquiries.assign" in granted
    assert "hr.role.assign" in granted


# =============================================================================
# Cross-department access
# =============================================================================


def test_cross_department_access_by_prefix():
    assert cross_department_access("finance") == CrossDepartmentAccess.READ_ONLY
    assert cross_department_access("admin") == CrossDepartmentAccess.MANAGED
    assert cross_department_access("support") == CrossDepartmentAccess.NONE


def test_cross_department_access_unknown_prefix_is_none():
    assert cross_department_access("unknown") == CrossDepartmentAccess.NONE
    assert cross_department_access(None) == CrossDepartmentAccess.NONE
    assert cross_department_access("") == CrossDepartmentAccess.NONE


def test_cross_department_access_ignores_case():
    assert cross_department_access("Finance") == CrossDepartmentAccess.READ_ONLY


# =============================================================================
# Separation of duty
# =============================================================================


def test_find_separation_rule_by_blocked_action():
    rule = find_separation_rule("finance.payout.approve")
    assert rule is not None
    assert rule.actor_action == "finance.payout.create"
    assert find_separation_rule("finance.payout.create") is None


def test_same_actor_is_blocked():
    actor_id = uuid.uuid4()
    rule = find_separation_rule("admin.role.approve")

    assert is_blocked(actor_id, actor_id, rule) is True
    assert is_blocked(actor_id, str(actor_id), rule) is True
    assert is_blocked(actor_id, uuid.uuid4(), rule) is False


def test_no_rule_or_no_prior_actor_never_blocks():
    actor_id = uuid.uuid4()
    assert is_blocked(actor_id, actor_id, None) is False
    assert is_blocked(actor_id, None, find_separation_rule("admin.role.approve")) is False


# =============================================================================
# Policies
# =============================================================================


def test_policy_keys_are_catalog_keys():
    policy = get_policy("inquiries")
    for action in ("reply", "assign", "escalate", "note", "change_status", "view_department"):
        for key in policy.keys(action):
            assert is_known_permission(key), key


def test_narrow_reply_is_not_a_department_reply():
    policy = get_policy("inquiries")
    assert "department.inquiries.reply" in policy.keys("reply")
    assert "department.inquiries.reply" not in policy.keys("reply_department")
