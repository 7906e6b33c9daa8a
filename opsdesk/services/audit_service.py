"""Inquiry audit trail.

Rows are written into the caller's session and flushed, never committed
here, so an audit row commits or rolls back with the mutation it records.
Audit rows are never updated or deleted.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from opsdesk.db.enums import InquiryAuditAction
from opsdesk.db.models import InquiryAudit


def record(
    db: Session,
    inquiry_id: UUID,
    action: InquiryAuditAction,
    performed_by_user_id: UUID,
    from_department_id: UUID | None = None,
    to_department_id: UUID | None = None,
) -> InquiryAudit:
    """Add an audit row to the current transaction."""
    audit = InquiryAudit(
        inquiry_id=inquiry_id,
        action=action,
        performed_by_user_id=performed_by_user_id,
        from_department_id=from_department_id,
        to_department_id=to_department_id,
    )
    db.add(audit)
    db.flush()
    return audit


def list_for_inquiry(db: Session, inquiry_id: UUID) -> list[InquiryAudit]:
    """Audit rows for an inquiry, newest first."""
    return (
        db.query(InquiryAudit)
        .filter(InquiryAudit.inquiry_id == inquiry_id)
        .order_by(InquiryAudit.created_at.desc())
        .all()
    )
