"""
Actor resolution tests.

Tests cover:
- Unknown and inactive identities resolve to an empty context
- super_admin wildcard, admin without restricted keys
- Effective role assignments (expired / future assignments excluded)
- Inactive staff profiles contribute nothing
"""

import uuid
from datetime import timedelta

import pytest

from opsdesk.core.exceptions import PermissionDeniedError
from opsdesk.core.permissions import WILDCARD_PERMISSION
from opsdesk.db.base import utcnow
from opsdesk.db.enums import Role, StaffStatus
from opsdesk.db.models import StaffProfile
from opsdesk.services import actor_service


def test_unknown_user_resolves_to_empty_context(db):
    user_id = uuid.uuid4()
    actor = actor_service.resolve_actor(db, user_id)

    assert actor.user_id == user_id
    assert actor.role is None
    assert actor.permissions == frozenset()
    assert actor.staff_profile_id is None
    assert not actor_service.has_permission(actor, "inquiries.view")


def test_inactive_user_resolves_to_empty_context(db, make_user):
    user = make_user(Role.ADMIN, is_active=False)
    actor = actor_service.resolve_actor(db, user.id)

    assert actor.role is None
    assert not actor_service.is_bypass(actor)
    with pytest.raises(PermissionDeniedError):
        actor_service.require_any_permission(actor, ["inquiries.view"])


def test_customer_gets_base_permissions(db, make_user):
    user = make_user()
    actor = actor_service.resolve_actor(db, user.id)

    assert actor.role == Role.USER
    assert actor.permissions == actor_service.BASE_PERMISSIONS
    assert actor.is_staff is False


def test_super_admin_holds_wildcard(db, make_user):
    user = make_user(Role.SUPER_ADMIN)
    actor = actor_service.resolve_actor(db, user.id)

    assert actor.permissions == frozenset({WILDCARD_PERMISSION})
    assert actor_service.has_permission(actor, "admin.permission.manage")
    assert actor_service.has_permission(actor, "anything.at.all")


def test_admin_holds_everything_but_restricted(db, make_user):
    user = make_user(Role.ADMIN)
    actor = actor_service.resolve_actor(db, user.id)

    assert actor_service.is_bypass(actor)
    assert actor_service.has_permission(actor, "finance.inquiries.manage")
    assert not actor_service.has_permission(actor, "admin.permission.manage")
    assert not actor_service.has_permission(actor, "admin.impersonate")


def test_can_bypass_scope():
    assert actor_service.can_bypass_scope(Role.SUPER_ADMIN, "admin.impersonate")
    assert actor_service.can_bypass_scope(Role.ADMIN, "support.inquiries.view")
    assert not actor_service.can_bypass_scope(Role.ADMIN, "admin.role.promote")
    assert not actor_service.can_bypass_scope(Role.USER, "support.inquiries.view")
    assert not actor_service.can_bypass_scope(None, "support.inquiries.view")


def test_staff_permissions_come_from_effective_assignments(db, org, actor_for):
    actor = actor_for(org.cs_agent)

    assert actor.staff_profile_id == org.cs_agent.id
    assert actor.department_id == org.cs.id
    assert actor.department_prefix == "support"
    assert "support.inquiries.assign" in actor.permissions
    assert "inquiries.create" in actor.permissions
    assert "finance.inquiries.view" not in actor.permissions


def test_expired_and_future_assignments_are_ignored(db, org, grant_role, actor_for):
    now = utcnow()
    grant_role(
        org.cs_agent,
        ["staff.view"],
        effective_from=now - timedelta(days=30),
        effective_to=now - timedelta(days=1),
    )
    grant_role(
        org.cs_agent,
        ["staff.manage"],
        effective_from=now + timedelta(days=1),
    )

    actor = actor_for(org.cs_agent)
    assert "staff.view" not in actor.permissions
    assert "staff.manage" not in actor.permissions


def test_assignment_window_is_evaluated_at_given_time(db, org, grant_role):
    now = utcnow()
    grant_role(org.cs_agent, ["staff.view"], effective_from=now + timedelta(days=1))

    actor = actor_service.resolve_actor(db, org.cs_agent.user_id, now=now + timedelta(days=2))
    assert "staff.view" in actor.permissions


def test_inactive_profile_contributes_nothing(db, org, make_staff, actor_for):
    suspended = make_staff(
        org.cs, ["support.inquiries.view"], status=StaffStatus.SUSPENDED
    )
    actor = actor_for(suspended)

    assert actor.staff_profile_id is None
    assert actor.department_id is None
    assert actor.permissions == actor_service.BASE_PERMISSIONS


def test_unknown_permission_keys_are_inert(db, org, grant_role, actor_for):
    grant_role(org.cs_agent, ["legacy.unknown.key"])
    actor = actor_for(org.cs_agent)

    assert "legacy.unknown.key" in actor.permissions
    assert actor_service.has_any_permission(actor, ["support.inquiries.view"])


def test_require_any_permission_logs_denial(db, make_user, caplog):
    actor = actor_service.resolve_actor(db, make_user().id)

    with caplog.at_level("WARNING", logger="opsdesk.services.actor_service"):
        with pytest.raises(PermissionDeniedError):
            actor_service.require_any_permission(actor, ["support.inquiries.assign"])

    record = next(r for r in caplog.records if r.message == "Permission denied")
    assert record.user_id == str(actor.user_id)
    assert record.required == ["support.inquiries.assign"]


def test_oldest_active_profile_wins(db, org, make_department, actor_for):
    marketing = make_department("MKT", "Marketing", access_prefix="marketing")
    db.add(
        StaffProfile(
            user_id=org.cs_agent.user_id,
            department_id=marketing.id,
            created_at=utcnow() + timedelta(days=1),
        )
    )
    db.commit()

    profile = actor_service.get_active_staff_profile(db, org.cs_agent.user_id)
    assert profile.id == org.cs_agent.id
    assert profile.department.code == "CS"
    assert actor_for(org.cs_agent).department_id == org.cs.id


def test_suspended_profile_is_not_active(db, make_department, make_staff):
    department = make_department("OPS", "Operations")
    suspended = make_staff(department, status=StaffStatus.SUSPENDED)

    assert actor_service.get_active_staff_profile(db, suspended.user_id) is None
