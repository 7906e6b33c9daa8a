"""Staff directory and staff profile lookups."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from opsdesk.core.exceptions import InquiryNotFoundError, PermissionDeniedError
from opsdesk.core.policies import get_policy
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.enums import StaffStatus
from opsdesk.db.models import Department, StaffProfile
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.staff import StaffDirectoryEntry
from opsdesk.services import actor_service

logger = logging.getLogger(__name__)


def get_assignable_profile(db: Session, staff_profile_id: UUID) -> StaffProfile:
    """Return an ACTIVE staff profile or raise InquiryNotFoundError."""
    profile = db.get(StaffProfile, staff_profile_id)
    if profile is None or profile.status != StaffStatus.ACTIVE:
        raise InquiryNotFoundError("Assignee staff profile not found or inactive")
    return profile


def list_active_staff_user_ids(db: Session, department_id: UUID) -> list[UUID]:
    """User ids of every ACTIVE staff member in a department."""
    rows = (
        db.query(StaffProfile.user_id)
        .filter(
            StaffProfile.department_id == department_id,
            StaffProfile.status == StaffStatus.ACTIVE,
        )
        .distinct()
        .all()
    )
    return [user_id for (user_id,) in rows]


def _can_view_all(db: Session, actor: ActorContext) -> bool:
    if actor_service.is_bypass(actor):
        return True
    if actor.department_id is None:
        return False
    department = db.get(Department, actor.department_id)
    return bool(department and department.can_view_all_departments)


def list_staff(db: Session, actor: ActorContext) -> list[StaffDirectoryEntry]:
    """
    Staff directory visible to the actor.

    Bypass actors and staff of a department flagged
    ``can_view_all_departments`` see everyone; staff holding ``staff.view``
    see their own department.
    """
    query = db.query(StaffProfile).options(
        joinedload(StaffProfile.user), joinedload(StaffProfile.department)
    )
    if not _can_view_all(db, actor):
        actor_service.require_any_permission(actor, get_policy("staff").keys())
        if actor.department_id is None:
            logger.warning(
                "Staff directory denied without department",
                extra=build_log_context(user_id=actor.user_id, action="list_staff"),
            )
            raise PermissionDeniedError("Staff directory requires an active staff profile")
        query = query.filter(StaffProfile.department_id == actor.department_id)

    profiles = query.order_by(StaffProfile.created_at.asc()).all()
    return [
        StaffDirectoryEntry(
            staff_profile_id=profile.id,
            user_id=profile.user_id,
            display_name=profile.user.display_name,
            email=profile.user.email,
            department_id=profile.department_id,
            department_code=profile.department.code,
            status=profile.status,
        )
        for profile in profiles
    ]
