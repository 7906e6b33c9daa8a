"""Actor context resolution and permission checks.

Resolution order:
- Unknown or inactive identity: empty context (every check fails)
- super_admin: wildcard ``*``
- admin: every catalog permission except the restricted system set
- Everyone else: inquiries.create + inquiries.view, plus the keys of every
  currently effective role assignment on the user's ACTIVE staff profile
"""

import logging
from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from opsdesk.core.exceptions import PermissionDeniedError
from opsdesk.core.permissions import (
    WILDCARD_PERMISSION,
    PermissionKey,
    grantable_to_admin,
    is_restricted_system_permission,
)
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.base import utcnow
from opsdesk.db.enums import BYPASS_ROLES, Role, StaffStatus
from opsdesk.db.models import StaffProfile, StaffRoleAssignment, StaffRolePermission, User
from opsdesk.schemas.auth import ActorContext

logger = logging.getLogger(__name__)

# Every authenticated identity may file and see its own inquiries
BASE_PERMISSIONS = frozenset(
    {PermissionKey.INQUIRIES_CREATE.value, PermissionKey.INQUIRIES_VIEW.value}
)


def get_active_staff_profile(db: Session, user_id: UUID) -> StaffProfile | None:
    """Oldest ACTIVE staff profile of a user, if any."""
    return (
        db.query(StaffProfile)
        .options(joinedload(StaffProfile.department))
        .filter(
            StaffProfile.user_id == user_id,
            StaffProfile.status == StaffStatus.ACTIVE,
        )
        .order_by(StaffProfile.created_at.asc(), StaffProfile.id.asc())
        .first()
    )


def _active_assignment_keys(
    db: Session, staff_profile_id: UUID, now: datetime
) -> set[str]:
    rows = (
        db.query(StaffRolePermission.permission_key)
        .join(
            StaffRoleAssignment,
            StaffRoleAssignment.role_id == StaffRolePermission.role_id,
        )
        .filter(
            StaffRoleAssignment.staff_profile_id == staff_profile_id,
            StaffRoleAssignment.effective_from <= now,
            or_(
                StaffRoleAssignment.effective_to.is_(None),
                StaffRoleAssignment.effective_to >= now,
            ),
        )
        .distinct()
        .all()
    )
    return {key for (key,) in rows}


def resolve_actor(
    db: Session,
    user_id: UUID,
    *,
    now: datetime | None = None,
) -> ActorContext:
    """
    Build a fresh ActorContext for ``user_id``.

    Never raises for unknown identities; callers turn the empty context
    into an authorization failure on the first permission check.
    """
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        logger.info(
            "Resolved empty actor context",
            extra=build_log_context(user_id=user_id, action="resolve_actor"),
        )
        return ActorContext(user_id=user_id)

    role = Role(user.role) if Role.has_value(user.role) else Role.USER
    profile = get_active_staff_profile(db, user.id)

    if role == Role.SUPER_ADMIN:
        permissions = frozenset({WILDCARD_PERMISSION})
    elif role == Role.ADMIN:
        permissions = grantable_to_admin()
    else:
        keys = set(BASE_PERMISSIONS)
        if profile is not None:
            keys |= _active_assignment_keys(db, profile.id, now or utcnow())
        permissions = frozenset(keys)

    return ActorContext(
        user_id=user.id,
        role=role,
        permissions=permissions,
        staff_profile_id=profile.id if profile else None,
        department_id=profile.department_id if profile else None,
        department_prefix=profile.department.access_prefix if profile else None,
    )


def is_bypass(actor: ActorContext) -> bool:
    """Admin-class actors satisfy scope checks through elevated privilege."""
    return actor.role in BYPASS_ROLES


def can_bypass_scope(role: Role | str | None, permission: str) -> bool:
    """super_admin always bypasses; admin bypasses unless the key is restricted."""
    if role == Role.SUPER_ADMIN:
        return True
    if role == Role.ADMIN:
        return not is_restricted_system_permission(permission)
    return False


def has_permission(actor: ActorContext, permission: str) -> bool:
    if WILDCARD_PERMISSION in actor.permissions:
        return True
    if can_bypass_scope(actor.role, permission):
        return True
    return permission in actor.permissions


def has_any_permission(actor: ActorContext, permissions: Iterable[str]) -> bool:
    return any(has_permission(actor, key) for key in permissions)


def require_any_permission(actor: ActorContext, permissions: Iterable[str]) -> None:
    """Raise PermissionDeniedError unless the actor holds one of ``permissions``."""
    keys = tuple(permissions)
    if has_any_permission(actor, keys):
        return
    logger.warning(
        "Permission denied",
        extra={
            **build_log_context(user_id=actor.user_id, action="require_permission"),
            "required": list(keys),
        },
    )
    raise PermissionDeniedError(
        f"Missing required permission. One of: {', '.join(keys)}"
    )
