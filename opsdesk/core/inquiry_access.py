"""Centralized view-scope resolution for inquiries.

Scope priority (first match wins):
- Bypass role: GLOBAL
- Department queue view permission: DEPARTMENT
- department.inquiries.view: ASSIGNED_ONLY
- inquiries.view: SELF_ONLY

DEPARTMENT scope also sees inquiries its department escalated away. The
department's cross-department policy can widen reads further; mutation
checks always compare the inquiry's current department.
"""

import logging
from uuid import UUID

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from opsdesk.core.exceptions import PermissionDeniedError
from opsdesk.core.permissions import CrossDepartmentAccess, ScopeType, cross_department_access
from opsdesk.core.policies import get_policy
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.enums import InquiryAuditAction
from opsdesk.db.models import Inquiry, InquiryAudit
from opsdesk.schemas.auth import ActorContext
from opsdesk.services import actor_service

logger = logging.getLogger(__name__)

_INQUIRY_POLICY = get_policy("inquiries")


def _deny(actor: ActorContext, message: str, action: str) -> PermissionDeniedError:
    logger.warning(
        message,
        extra=build_log_context(user_id=actor.user_id, action=action),
    )
    return PermissionDeniedError(message)


def resolve_view_scope(actor: ActorContext) -> ScopeType:
    if actor_service.is_bypass(actor):
        return ScopeType.GLOBAL
    if actor_service.has_any_permission(actor, _INQUIRY_POLICY.keys("view_department")):
        return ScopeType.DEPARTMENT
    if actor_service.has_any_permission(actor, _INQUIRY_POLICY.keys("view_assigned")):
        return ScopeType.ASSIGNED_ONLY
    if actor_service.has_any_permission(actor, _INQUIRY_POLICY.keys("view_self")):
        return ScopeType.SELF_ONLY
    raise _deny(actor, "Missing permission to view inquiries", "resolve_scope")


def require_department(actor: ActorContext) -> UUID:
    """Department of a department-scoped actor; Forbidden without a staff profile."""
    if actor.department_id is None:
        raise _deny(
            actor,
            "Department-scoped access requires active staff profile",
            "require_department",
        )
    return actor.department_id


def escalated_from(department_id: UUID) -> ColumnElement[bool]:
    """Inquiry has an ESCALATED audit leaving ``department_id``."""
    return exists().where(
        InquiryAudit.inquiry_id == Inquiry.id,
        InquiryAudit.action == InquiryAuditAction.ESCALATED,
        InquiryAudit.from_department_id == department_id,
    )


def escalated_into(department_id: UUID) -> ColumnElement[bool]:
    """Inquiry has an ESCALATED audit arriving in ``department_id``."""
    return exists().where(
        InquiryAudit.inquiry_id == Inquiry.id,
        InquiryAudit.action == InquiryAuditAction.ESCALATED,
        InquiryAudit.to_department_id == department_id,
    )


def filter_for_scope(actor: ActorContext, scope: ScopeType) -> ColumnElement[bool] | None:
    """
    Boolean clause restricting ``Inquiry`` rows to the actor's scope.

    Returns None when no restriction applies.
    """
    if scope == ScopeType.GLOBAL:
        return None
    if scope == ScopeType.SELF_ONLY:
        return Inquiry.created_by_user_id == actor.user_id
    if scope == ScopeType.ASSIGNED_ONLY:
        if actor.staff_profile_id is None:
            raise _deny(
                actor,
                "Assigned scope requires active staff profile",
                "filter_for_scope",
            )
        return Inquiry.assigned_to_staff_id == actor.staff_profile_id

    department_id = require_department(actor)
    access = cross_department_access(actor.department_prefix)
    if access == CrossDepartmentAccess.MANAGED:
        return None

    clauses = [Inquiry.department_id == department_id, escalated_from(department_id)]
    if access == CrossDepartmentAccess.READ_ONLY:
        clauses.append(escalated_into(department_id))
    return or_(*clauses)


def scoped_query(db: Session, actor: ActorContext, scope: ScopeType):
    """``Inquiry`` query restricted to the actor's scope."""
    query = db.query(Inquiry)
    clause = filter_for_scope(actor, scope)
    if clause is not None:
        query = query.filter(clause)
    return query


def was_escalated_from(db: Session, inquiry_id: UUID, department_id: UUID) -> bool:
    return db.query(
        exists().where(
            and_(
                InquiryAudit.inquiry_id == inquiry_id,
                InquiryAudit.action == InquiryAuditAction.ESCALATED,
                InquiryAudit.from_department_id == department_id,
            )
        )
    ).scalar()


def require_same_department(actor: ActorContext, inquiry: Inquiry, action: str) -> None:
    """Non-bypass actors may only mutate inquiries currently in their department."""
    if actor_service.is_bypass(actor):
        return
    department_id = require_department(actor)
    if inquiry.department_id != department_id:
        raise _deny(actor, "Cannot modify inquiry from another department", action)
