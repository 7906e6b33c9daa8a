"""Inquiry overview metrics for administrators.

Counts are computed from the inquiries table at read time:
- unresolved: OPEN / ASSIGNED / IN_PROGRESS / ESCALATED
- resolved: RESOLVED / CLOSED
- unchecked: OPEN with no assignee
- in charge: unresolved with an assignee
"""

import logging
from datetime import timedelta

from sqlalchemy import case as sql_case, func
from sqlalchemy.orm import Session

from opsdesk.core.config import settings
from opsdesk.core.exceptions import PermissionDeniedError
from opsdesk.core.inquiry_access import resolve_view_scope, scoped_query
from opsdesk.core.inquiry_workflow import SOLVED_STATUSES, UNRESOLVED_STATUSES
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.base import utcnow
from opsdesk.db.enums import InquiryStatus
from opsdesk.db.models import Inquiry, StaffProfile, User
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.inquiry import InquiryOverview, OverviewTotals, StaffPerformance
from opsdesk.services import actor_service

logger = logging.getLogger(__name__)


def _count(query, *criteria) -> int:
    return query.filter(*criteria).count()


def get_overview(db: Session, actor: ActorContext, days: int | None = None) -> InquiryOverview:
    """Totals by status bucket plus the per-staff solve leaderboard."""
    if not actor_service.is_bypass(actor):
        logger.warning(
            "Overview denied",
            extra=build_log_context(user_id=actor.user_id, action="overview"),
        )
        raise PermissionDeniedError("Only admins can view the inquiry overview")

    base = scoped_query(db, actor, resolve_view_scope(actor))
    if days is not None:
        base = base.filter(Inquiry.created_at >= utcnow() - timedelta(days=days))

    unresolved = tuple(UNRESOLVED_STATUSES)
    totals = OverviewTotals(
        total=base.count(),
        unresolved=_count(base, Inquiry.status.in_(unresolved)),
        resolved=_count(base, Inquiry.status.in_(tuple(SOLVED_STATUSES))),
        unchecked=_count(
            base,
            Inquiry.status == InquiryStatus.OPEN,
            Inquiry.assigned_to_staff_id.is_(None),
        ),
        in_charge=_count(
            base,
            Inquiry.status.in_(unresolved),
            Inquiry.assigned_to_staff_id.is_not(None),
        ),
    )

    resolved_count = func.sum(sql_case((Inquiry.status == InquiryStatus.RESOLVED, 1), else_=0))
    closed_count = func.sum(sql_case((Inquiry.status == InquiryStatus.CLOSED, 1), else_=0))
    rows = (
        base.join(StaffProfile, StaffProfile.id == Inquiry.assigned_to_staff_id)
        .join(User, User.id == StaffProfile.user_id)
        .with_entities(
            StaffProfile.id,
            User.display_name,
            User.email,
            resolved_count,
            closed_count,
            func.count(Inquiry.id),
        )
        .group_by(StaffProfile.id, User.display_name, User.email)
        .all()
    )

    leaderboard = []
    for staff_profile_id, name, email, resolved, closed, assigned_total in rows:
        resolved = int(resolved or 0)
        closed = int(closed or 0)
        leaderboard.append(
            StaffPerformance(
                staff_profile_id=staff_profile_id,
                staff_name=name or "Unknown staff",
                staff_email=email or "-",
                solved_count=resolved + closed,
                resolved_count=resolved,
                closed_count=closed,
                active_count=assigned_total - resolved - closed,
                assigned_total=assigned_total,
            )
        )
    leaderboard.sort(key=lambda row: (-row.solved_count, -row.active_count, row.staff_name))

    return InquiryOverview(
        totals=totals,
        staff_performance=leaderboard[: settings.OVERVIEW_LEADERBOARD_SIZE],
    )
