"""Contact intake - turns public contact-form submissions into inquiries.

Routing:
- support / author / publisher: customer support queue (CS)
- business / legal: finance queue (FIN)

When the preferred department code is missing, the first active department
whose code or name matches a fallback token is used instead.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.enums import (
    DEFAULT_INQUIRY_PRIORITY,
    ContactType,
    InquiryAuditAction,
    InquirySenderType,
    InquiryStatus,
    InquiryType,
    NotificationType,
    Role,
)
from opsdesk.db.models import Department, Inquiry, InquiryMessage, User
from opsdesk.schemas.contact import ContactSubmission
from opsdesk.services import audit_service, notification_service

logger = logging.getLogger(__name__)

_SUPPORT_FALLBACKS = ("CS", "SUPPORT", "CUSTOMER_SERVICE", "CUSTOMER SUPPORT")

INQUIRY_TYPE_BY_CONTACT_TYPE = {
    ContactType.SUPPORT: InquiryType.OTHER,
    ContactType.AUTHOR: InquiryType.AUTHOR,
    ContactType.PUBLISHER: InquiryType.AUTHOR,
    ContactType.BUSINESS: InquiryType.PAYMENT,
    ContactType.LEGAL: InquiryType.LEGAL,
}

DEPARTMENT_CODE_BY_CONTACT_TYPE = {
    ContactType.SUPPORT: "CS",
    ContactType.AUTHOR: "CS",
    ContactType.PUBLISHER: "CS",
    ContactType.BUSINESS: "FIN",
    ContactType.LEGAL: "FIN",
}

DEPARTMENT_FALLBACKS_BY_CONTACT_TYPE = {
    ContactType.SUPPORT: _SUPPORT_FALLBACKS,
    ContactType.AUTHOR: _SUPPORT_FALLBACKS,
    ContactType.PUBLISHER: _SUPPORT_FALLBACKS,
    ContactType.BUSINESS: ("FIN", "FINANCE", "ACCOUNTING"),
    ContactType.LEGAL: ("FIN", "FINANCE", "LEGAL"),
}


def resolve_department(db: Session, contact_type: ContactType) -> Department | None:
    preferred = (
        db.query(Department)
        .filter(
            Department.code == DEPARTMENT_CODE_BY_CONTACT_TYPE[contact_type],
            Department.is_active.is_(True),
        )
        .first()
    )
    if preferred is not None:
        return preferred

    tokens = [token.lower() for token in DEPARTMENT_FALLBACKS_BY_CONTACT_TYPE[contact_type]]
    candidates = (
        db.query(Department)
        .filter(Department.is_active.is_(True))
        .order_by(Department.created_at.asc())
        .all()
    )
    for department in candidates:
        code = department.code.lower()
        name = department.name.lower()
        if any(token in code or token in name for token in tokens):
            return department
    return None


def resolve_creator(db: Session, email: str) -> tuple[User | None, bool]:
    """
    Inquiry creator for a submission.

    Returns ``(user, is_linked)``: the user whose email matches, else the
    oldest active admin or super admin.
    """
    linked = (
        db.query(User)
        .filter(func.lower(User.email) == email.strip().lower())
        .first()
    )
    if linked is not None:
        return linked, True

    fallback = (
        db.query(User)
        .filter(
            User.is_active.is_(True),
            User.role.in_([Role.ADMIN.value, Role.SUPER_ADMIN.value]),
        )
        .order_by(User.created_at.asc())
        .first()
    )
    return fallback, False


def submit_contact(db: Session, data: ContactSubmission) -> Inquiry | None:
    """
    Route a contact submission into an OPEN inquiry.

    Returns None when no department or creator can be resolved; the
    submission is then left for manual follow-up.
    """
    department = resolve_department(db, data.type)
    creator, is_linked = resolve_creator(db, data.email)
    if department is None or creator is None:
        logger.warning(
            "Contact submission could not be routed",
            extra=build_log_context(action="contact_intake"),
        )
        return None

    subject = (data.subject or "").strip() or f"Contact inquiry ({data.type.value})"
    inquiry = Inquiry(
        type=INQUIRY_TYPE_BY_CONTACT_TYPE[data.type],
        subject=subject,
        status=InquiryStatus.OPEN,
        priority=DEFAULT_INQUIRY_PRIORITY,
        department_id=department.id,
        created_by_user_id=creator.id,
    )
    try:
        db.add(inquiry)
        db.flush()
        db.add(
            InquiryMessage(
                inquiry_id=inquiry.id,
                sender_id=creator.id,
                sender_type=InquirySenderType.USER,
                message=f"Contact sender: {data.name} <{data.email}>\n\n{data.message}",
            )
        )
        audit_service.record(
            db,
            inquiry.id,
            InquiryAuditAction.CREATED,
            creator.id,
            to_department_id=department.id,
        )
        notification_service.notify_department(
            db,
            department.id,
            NotificationType.INQUIRY_CREATED,
            title="New inquiry from contact form",
            body=subject,
            link=notification_service.staff_inquiry_link(inquiry.id),
            entity_id=inquiry.id,
        )
        if is_linked:
            notification_service.notify_user(
                db,
                creator.id,
                NotificationType.INQUIRY_UPDATE,
                title="Inquiry received",
                body="We received your inquiry and routed it to our staff. You will get an update soon.",
                link=notification_service.customer_inquiry_link(inquiry.id),
                entity_id=inquiry.id,
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(inquiry)
    logger.info(
        "Contact submission routed",
        extra=build_log_context(
            user_id=creator.id,
            inquiry_id=inquiry.id,
            department_id=department.id,
            action="contact_intake",
        ),
    )
    return inquiry
