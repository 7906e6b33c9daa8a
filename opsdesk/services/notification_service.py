"""
Notification Service - durable notification requests for inquiry events.

Notifications are added to the caller's session so they commit with the
inquiry mutation that triggered them. Delivery happens downstream.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from opsdesk.db.enums import NotificationType
from opsdesk.db.models import Notification
from opsdesk.services import staff_service

INQUIRY_ENTITY = "inquiry"


def staff_inquiry_link(inquiry_id: UUID) -> str:
    return f"/admin/inquiries/{inquiry_id}"


def customer_inquiry_link(inquiry_id: UUID) -> str:
    return f"/inquiries/{inquiry_id}"


def notify_user(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    body: str | None = None,
    link: str | None = None,
    entity_id: UUID | None = None,
) -> Notification:
    """Record a notification for a single user."""
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        body=body,
        link=link,
        entity_type=INQUIRY_ENTITY if entity_id else None,
        entity_id=entity_id,
    )
    db.add(notification)
    return notification


def notify_department(
    db: Session,
    department_id: UUID,
    type: NotificationType,
    title: str,
    body: str | None = None,
    link: str | None = None,
    entity_id: UUID | None = None,
) -> list[Notification]:
    """
    Record a notification for every ACTIVE staff member of a department.

    Staff are enumerated inside the caller's transaction, so someone
    deactivated concurrently is not notified.
    """
    return [
        notify_user(
            db,
            user_id=user_id,
            type=type,
            title=title,
            body=body,
            link=link,
            entity_id=entity_id,
        )
        for user_id in staff_service.list_active_staff_user_ids(db, department_id)
    ]
