"""Inquiry service - lifecycle operations for customer inquiries.

Every operation resolves the actor's scope first, performs all
authorization and not-found checks, then applies the mutation together
with its audit rows and notification requests in a single commit.
"""

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from opsdesk.core.config import settings
from opsdesk.core.exceptions import (
    InquiryConflictError,
    InquiryNotFoundError,
    InvalidInquiryStateError,
    PermissionDeniedError,
)
from opsdesk.core.inquiry_access import (
    require_department,
    require_same_department,
    resolve_view_scope,
    scoped_query,
    was_escalated_from,
)
from opsdesk.core.inquiry_workflow import (
    SOLVED_STATUSES,
    audit_action_for_status,
    can_transition,
    is_terminal,
    next_status_on_message,
    should_auto_assign,
)
from opsdesk.core.permissions import ScopeType
from opsdesk.core.policies import get_policy
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.base import utcnow
from opsdesk.db.enums import (
    InquiryAuditAction,
    InquirySenderType,
    InquiryStatus,
    NotificationType,
)
from opsdesk.db.models import (
    Department,
    Inquiry,
    InquiryAudit,
    InquiryInternalNote,
    InquiryMessage,
    StaffProfile,
)
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.inquiry import (
    InquiryAssign,
    InquiryCreate,
    InquiryEscalate,
    InquiryListItem,
    InquiryListParams,
    InquiryListResponse,
    InquiryMessageCreate,
    InquiryMessageRead,
    InquiryNoteCreate,
    InquiryNoteRead,
    InquiryRead,
    InquiryStatusUpdate,
)
from opsdesk.services import actor_service, audit_service, notification_service, staff_service

logger = logging.getLogger(__name__)

_POLICY = get_policy("inquiries")


# =============================================================================
# Helpers
# =============================================================================


def _is_staff(actor: ActorContext) -> bool:
    return actor_service.is_bypass(actor) or actor.is_staff


def _log(message: str, actor: ActorContext, inquiry: Inquiry, action: str) -> None:
    logger.info(
        message,
        extra=build_log_context(
            user_id=actor.user_id,
            inquiry_id=inquiry.id,
            department_id=inquiry.department_id,
            action=action,
        ),
    )


def _deny(actor: ActorContext, inquiry_id: UUID, message: str, action: str) -> PermissionDeniedError:
    logger.warning(
        message,
        extra=build_log_context(user_id=actor.user_id, inquiry_id=inquiry_id, action=action),
    )
    return PermissionDeniedError(message)


def get_intake_department(db: Session) -> Department:
    """The active department that receives newly filed inquiries."""
    department = (
        db.query(Department)
        .filter(
            Department.code == settings.INTAKE_DEPARTMENT_CODE,
            Department.is_active.is_(True),
        )
        .first()
    )
    if department is None:
        raise InquiryNotFoundError("Customer Support department not configured")
    return department


def _get_inquiry_or_404(db: Session, inquiry_id: UUID) -> Inquiry:
    inquiry = db.get(Inquiry, inquiry_id)
    if inquiry is None:
        raise InquiryNotFoundError("Inquiry not found")
    return inquiry


def _load_scoped(
    db: Session, actor: ActorContext, inquiry_id: UUID, scope: ScopeType
) -> Inquiry:
    inquiry = scoped_query(db, actor, scope).filter(Inquiry.id == inquiry_id).first()
    if inquiry is None:
        raise InquiryNotFoundError("Inquiry not found")
    return inquiry


def _in_department_or_escalated_from(db: Session, actor: ActorContext, inquiry: Inquiry) -> bool:
    """
    Write guard for replies and notes.

    Cross-department read policies never apply here: non-bypass staff must
    own the inquiry's current department or have escalated it away.
    """
    if actor_service.is_bypass(actor):
        return True
    department_id = require_department(actor)
    return inquiry.department_id == department_id or was_escalated_from(
        db, inquiry.id, department_id
    )


def _claim_unassigned(db: Session, inquiry: Inquiry, actor: ActorContext) -> bool:
    """
    Assign an unassigned inquiry to the acting staff member.

    Compare-and-set on ``assigned_to_staff_id IS NULL``: only the first
    writer wins. The loser gets False and the winner's assignment is
    reloaded onto ``inquiry``.
    """
    result = db.execute(
        update(Inquiry)
        .where(Inquiry.id == inquiry.id, Inquiry.assigned_to_staff_id.is_(None))
        .values(assigned_to_staff_id=actor.staff_profile_id)
        .execution_options(synchronize_session=False)
    )
    db.refresh(inquiry)
    if result.rowcount != 1:
        logger.info(
            "Auto-assign lost to another staff member",
            extra=build_log_context(
                user_id=actor.user_id, inquiry_id=inquiry.id, action="auto_assign"
            ),
        )
        return False

    audit_service.record(
        db,
        inquiry.id,
        InquiryAuditAction.ASSIGNED,
        actor.user_id,
        to_department_id=inquiry.department_id,
    )
    return True


def _assignee_user_id(db: Session, inquiry: Inquiry) -> UUID | None:
    if inquiry.assigned_to_staff_id is None:
        return None
    profile = db.get(StaffProfile, inquiry.assigned_to_staff_id)
    return profile.user_id if profile else None


def serialize_inquiry(inquiry: Inquiry, actor: ActorContext) -> InquiryRead:
    """Inquiry with messages; internal notes only for staff and bypass actors."""
    item = InquiryListItem.model_validate(inquiry)
    notes = None
    if _is_staff(actor):
        notes = [InquiryNoteRead.model_validate(note) for note in inquiry.internal_notes]
    return InquiryRead(
        **item.model_dump(),
        messages=[InquiryMessageRead.model_validate(m) for m in inquiry.messages],
        internal_notes=notes,
    )


# =============================================================================
# Create / Read
# =============================================================================


def create_inquiry(db: Session, actor: ActorContext, data: InquiryCreate) -> Inquiry:
    """
    File a new inquiry in the intake department queue.

    Writes the first customer message, a CREATED audit and a notification
    for every active staff member of the intake department.
    """
    actor_service.require_any_permission(actor, _POLICY.keys("create"))
    department = get_intake_department(db)

    inquiry = Inquiry(
        type=data.type,
        subject=data.subject.strip(),
        priority=data.priority,
        status=InquiryStatus.OPEN,
        department_id=department.id,
        created_by_user_id=actor.user_id,
    )
    try:
        db.add(inquiry)
        db.flush()
        db.add(
            InquiryMessage(
                inquiry_id=inquiry.id,
                sender_id=actor.user_id,
                sender_type=InquirySenderType.USER,
                message=data.message,
            )
        )
        audit_service.record(
            db,
            inquiry.id,
            InquiryAuditAction.CREATED,
            actor.user_id,
            to_department_id=department.id,
        )
        notification_service.notify_department(
            db,
            department.id,
            NotificationType.INQUIRY_CREATED,
            title=f"New inquiry in {department.name} queue",
            body=inquiry.subject,
            link=notification_service.staff_inquiry_link(inquiry.id),
            entity_id=inquiry.id,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(inquiry)
    _log("Inquiry created", actor, inquiry, "create")
    return inquiry


def list_inquiries(
    db: Session, actor: ActorContext, params: InquiryListParams
) -> InquiryListResponse:
    """Page through the inquiries visible to the actor, most recently updated first."""
    scope = resolve_view_scope(actor)
    query = scoped_query(db, actor, scope)

    if params.status:
        query = query.filter(Inquiry.status == params.status)
    if params.type:
        query = query.filter(Inquiry.type == params.type)
    if params.priority:
        query = query.filter(Inquiry.priority == params.priority)
    if params.q:
        query = query.filter(Inquiry.subject.ilike(f"%{params.q.strip()}%"))

    limit = min(params.limit, settings.MAX_PAGE_SIZE)
    total = query.count()
    items = (
        query.order_by(Inquiry.updated_at.desc(), Inquiry.id)
        .offset((params.page - 1) * limit)
        .limit(limit)
        .all()
    )
    return InquiryListResponse(
        items=[InquiryListItem.model_validate(item) for item in items],
        total=total,
        page=params.page,
        limit=limit,
    )


def get_inquiry(db: Session, actor: ActorContext, inquiry_id: UUID) -> InquiryRead:
    scope = resolve_view_scope(actor)
    inquiry = (
        scoped_query(db, actor, scope)
        .options(selectinload(Inquiry.messages), selectinload(Inquiry.internal_notes))
        .filter(Inquiry.id == inquiry_id)
        .first()
    )
    if inquiry is None:
        raise InquiryNotFoundError("Inquiry not found")
    return serialize_inquiry(inquiry, actor)


def list_audit(db: Session, actor: ActorContext, inquiry_id: UUID) -> list[InquiryAudit]:
    """Audit trail, newest first, gated by the same scope as get_inquiry."""
    scope = resolve_view_scope(actor)
    _load_scoped(db, actor, inquiry_id, scope)
    return audit_service.list_for_inquiry(db, inquiry_id)


# =============================================================================
# Conversation
# =============================================================================


def add_message(
    db: Session,
    actor: ActorContext,
    inquiry_id: UUID,
    data: InquiryMessageCreate,
) -> Inquiry:
    """
    Post a customer or staff message.

    A staff reply to an unassigned inquiry in the replier's department
    claims it first. OPEN/ASSIGNED inquiries move to IN_PROGRESS.
    """
    scope = resolve_view_scope(actor)
    inquiry = _load_scoped(db, actor, inquiry_id, scope)

    if _is_staff(actor):
        actor_service.require_any_permission(actor, _POLICY.keys("reply"))
        if (
            not actor_service.has_any_permission(actor, _POLICY.keys("reply_department"))
            and actor_service.has_any_permission(actor, _POLICY.keys("reply_assigned"))
            and inquiry.assigned_to_staff_id != actor.staff_profile_id
        ):
            raise _deny(
                actor,
                inquiry.id,
                "Assigned-only staff can only reply to assigned inquiries",
                "reply",
            )
        if not _in_department_or_escalated_from(db, actor, inquiry):
            raise _deny(actor, inquiry.id, "Cannot reply to inquiry outside your department", "reply")
        sender_type = InquirySenderType.STAFF
    else:
        actor_service.require_any_permission(actor, _POLICY.keys("view_self"))
        if inquiry.created_by_user_id != actor.user_id:
            raise _deny(actor, inquiry.id, "Cannot reply to another user inquiry", "reply")
        sender_type = InquirySenderType.USER

    try:
        db.add(
            InquiryMessage(
                inquiry_id=inquiry.id,
                sender_id=actor.user_id,
                sender_type=sender_type,
                message=data.message,
            )
        )

        if (
            sender_type == InquirySenderType.STAFF
            and actor.staff_profile_id is not None
            and inquiry.assigned_to_staff_id is None
            and inquiry.department_id == actor.department_id
            and should_auto_assign(inquiry.status)
        ):
            _claim_unassigned(db, inquiry, actor)

        current = inquiry.status
        next_status = next_status_on_message(current, sender_type)
        if next_status != current:
            inquiry.status = next_status
            audit_service.record(
                db,
                inquiry.id,
                InquiryAuditAction.STATUS_CHANGED,
                actor.user_id,
                to_department_id=inquiry.department_id,
            )
        inquiry.updated_at = utcnow()

        if sender_type == InquirySenderType.USER:
            assignee_user_id = _assignee_user_id(db, inquiry)
            if assignee_user_id is not None:
                notification_service.notify_user(
                    db,
                    assignee_user_id,
                    NotificationType.INQUIRY_REPLY,
                    title="Customer replied to inquiry",
                    body=inquiry.subject,
                    link=notification_service.staff_inquiry_link(inquiry.id),
                    entity_id=inquiry.id,
                )
            else:
                notification_service.notify_department(
                    db,
                    inquiry.department_id,
                    NotificationType.INQUIRY_REPLY,
                    title="New customer reply in department queue",
                    body=inquiry.subject,
                    link=notification_service.staff_inquiry_link(inquiry.id),
                    entity_id=inquiry.id,
                )
        else:
            notification_service.notify_user(
                db,
                inquiry.created_by_user_id,
                NotificationType.INQUIRY_REPLY,
                title="Staff replied to your inquiry",
                body=inquiry.subject,
                link=notification_service.customer_inquiry_link(inquiry.id),
                entity_id=inquiry.id,
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(inquiry)
    _log("Inquiry message added", actor, inquiry, "reply")
    return inquiry


def add_internal_note(
    db: Session,
    actor: ActorContext,
    inquiry_id: UUID,
    data: InquiryNoteCreate,
) -> InquiryInternalNote:
    """Staff-only note on an inquiry in, or escalated from, the actor's department."""
    if not _is_staff(actor):
        raise _deny(actor, inquiry_id, "Only staff can create internal notes", "note")
    actor_service.require_any_permission(actor, _POLICY.keys("note"))

    scope = resolve_view_scope(actor)
    inquiry = _load_scoped(db, actor, inquiry_id, scope)

    if not _in_department_or_escalated_from(db, actor, inquiry):
        raise _deny(actor, inquiry.id, "Cannot write internal note outside your scope", "note")

    note = InquiryInternalNote(
        inquiry_id=inquiry.id,
        staff_id=actor.staff_profile_id,
        author_user_id=actor.user_id,
        note=data.note,
    )
    try:
        db.add(note)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(note)
    _log("Internal note added", actor, inquiry, "note")
    return note


# =============================================================================
# Routing
# =============================================================================


def assign_inquiry(
    db: Session,
    actor: ActorContext,
    inquiry_id: UUID,
    data: InquiryAssign,
) -> Inquiry:
    """
    Assign an inquiry to an active staff member of its department.

    The update is conditional on the department seen during the checks;
    a concurrent escalation or resolution raises InquiryConflictError.
    """
    actor_service.require_any_permission(actor, _POLICY.keys("assign"))
    inquiry = _get_inquiry_or_404(db, inquiry_id)
    require_same_department(actor, inquiry, "assign")
    if is_terminal(inquiry.status):
        raise InvalidInquiryStateError("Cannot assign a resolved or closed inquiry")

    assignee = staff_service.get_assignable_profile(db, data.staff_profile_id)
    if assignee.department_id != inquiry.department_id:
        raise _deny(actor, inquiry.id, "Assignee must belong to the inquiry department", "assign")

    department_id = inquiry.department_id
    try:
        result = db.execute(
            update(Inquiry)
            .where(
                Inquiry.id == inquiry.id,
                Inquiry.department_id == department_id,
                Inquiry.status.not_in(tuple(SOLVED_STATUSES)),
            )
            .values(assigned_to_staff_id=assignee.id, status=InquiryStatus.ASSIGNED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InquiryConflictError("Inquiry changed while assigning; reload and retry")

        audit_service.record(
            db,
            inquiry.id,
            InquiryAuditAction.ASSIGNED,
            actor.user_id,
            to_department_id=department_id,
        )
        notification_service.notify_user(
            db,
            assignee.user_id,
            NotificationType.INQUIRY_ASSIGNED,
            title="Inquiry assigned to you",
            body=inquiry.subject,
            link=notification_service.staff_inquiry_link(inquiry.id),
            entity_id=inquiry.id,
        )
        db.commit()
    except (InquiryConflictError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(inquiry)
    _log("Inquiry assigned", actor, inquiry, "assign")
    return inquiry


def escalate_inquiry(
    db: Session,
    actor: ActorContext,
    inquiry_id: UUID,
    data: InquiryEscalate,
) -> Inquiry:
    """
    Move an inquiry to another department's queue and clear its assignee.

    The originating department keeps read access through the ESCALATED
    audit row.
    """
    actor_service.require_any_permission(actor, _POLICY.keys("escalate"))
    inquiry = _get_inquiry_or_404(db, inquiry_id)
    require_same_department(actor, inquiry, "escalate")
    if is_terminal(inquiry.status):
        raise InvalidInquiryStateError("Cannot escalate a resolved or closed inquiry")

    target = db.get(Department, data.to_department_id)
    if target is None or not target.is_active:
        raise InquiryNotFoundError("Target department not found or inactive")

    from_department_id = inquiry.department_id
    try:
        result = db.execute(
            update(Inquiry)
            .where(
                Inquiry.id == inquiry.id,
                Inquiry.department_id == from_department_id,
                Inquiry.status.not_in(tuple(SOLVED_STATUSES)),
            )
            .values(
                department_id=target.id,
                assigned_to_staff_id=None,
                status=InquiryStatus.ESCALATED,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InquiryConflictError("Inquiry changed while escalating; reload and retry")

        audit_service.record(
            db,
            inquiry.id,
            InquiryAuditAction.ESCALATED,
            actor.user_id,
            from_department_id=from_department_id,
            to_department_id=target.id,
        )
        notification_service.notify_department(
            db,
            target.id,
            NotificationType.INQUIRY_ESCALATED,
            title="Escalated inquiry in your queue",
            body=inquiry.subject,
            link=notification_service.staff_inquiry_link(inquiry.id),
            entity_id=inquiry.id,
        )
        db.commit()
    except (InquiryConflictError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(inquiry)
    _log("Inquiry escalated", actor, inquiry, "escalate")
    return inquiry


def update_status(
    db: Session,
    actor: ActorContext,
    inquiry_id: UUID,
    data: InquiryStatusUpdate,
) -> Inquiry:
    """
    Explicitly move an inquiry to another status.

    An unassigned inquiry is first claimed by the acting (non-bypass) staff
    member. Always audits STATUS_CHANGED, or CLOSED when closing.
    """
    actor_service.require_any_permission(actor, _POLICY.keys("change_status"))
    scope = resolve_view_scope(actor)
    inquiry = _load_scoped(db, actor, inquiry_id, scope)

    if scope == ScopeType.ASSIGNED_ONLY and inquiry.assigned_to_staff_id != actor.staff_profile_id:
        raise _deny(
            actor,
            inquiry.id,
            "Assigned-only staff can only update assigned inquiries",
            "change_status",
        )
    if scope == ScopeType.DEPARTMENT and inquiry.department_id != actor.department_id:
        raise _deny(
            actor,
            inquiry.id,
            "Cannot update inquiry outside your department",
            "change_status",
        )
    if not can_transition(inquiry.status, data.status):
        raise InvalidInquiryStateError(
            f"Cannot change status from {inquiry.status.value} to {data.status.value}"
        )

    try:
        if (
            actor.staff_profile_id is not None
            and not actor_service.is_bypass(actor)
            and inquiry.assigned_to_staff_id is None
            and should_auto_assign(inquiry.status)
        ):
            _claim_unassigned(db, inquiry, actor)

        inquiry.status = data.status
        inquiry.updated_at = utcnow()
        audit_service.record(
            db,
            inquiry.id,
            audit_action_for_status(data.status),
            actor.user_id,
            to_department_id=inquiry.department_id,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(inquiry)
    _log("Inquiry status updated", actor, inquiry, "change_status")
    return inquiry
