"""Quick-reply templates for inquiry responses.

The template table ships in its own migration. Until it is provisioned,
listing degrades to an empty list while writes raise
TemplatesUnavailableError (retryable, distinct from not found).
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from opsdesk.core.exceptions import InquiryNotFoundError, TemplatesUnavailableError
from opsdesk.core.policies import get_policy
from opsdesk.core.structured_logging import build_log_context
from opsdesk.db.enums import COMMON_TEMPLATE_TYPE, InquiryType
from opsdesk.db.models import QuickReplyTemplate
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.quick_reply import (
    QuickReplyTemplateCreate,
    QuickReplyTemplateRead,
    QuickReplyTemplateUpdate,
)
from opsdesk.services import actor_service

logger = logging.getLogger(__name__)

_POLICY = get_policy("quick_reply_templates")

# SQLSTATE for "undefined table" on PostgreSQL
_UNDEFINED_TABLE = "42P01"
_MISSING_TABLE_MARKERS = ("no such table", "does not exist", "undefinedtable")


# =============================================================================
# Default Templates
# =============================================================================

DEFAULT_TEMPLATES = [
    {
        "id": "common_ack_investigating",
        "title": "Acknowledge and Investigate",
        "body": "Thank you for reaching out. We have received your request and are actively checking this for you now. We will update you shortly with the next step.",
        "type": None,
        "tags": ["triage", "general"],
    },
    {
        "id": "common_need_details",
        "title": "Request More Details",
        "body": "To help you faster, please share the order number and a short description of what happened. If available, include a screenshot so we can verify immediately.",
        "type": None,
        "tags": ["triage"],
    },
    {
        "id": "order_delivery_delay",
        "title": "Delivery Delay Update",
        "body": "We checked your order and confirmed there is a delivery delay. We are coordinating with logistics and will send your next update within 24 hours.",
        "type": InquiryType.ORDER,
        "tags": ["delivery"],
    },
    {
        "id": "payment_refund_in_progress",
        "title": "Refund In Progress",
        "body": "Your refund request is now in progress with our finance team. We will notify you once processing is complete and share the transaction reference.",
        "type": InquiryType.PAYMENT,
        "tags": ["refund"],
    },
    {
        "id": "author_handoff",
        "title": "Author Team Handoff",
        "body": "Thank you for your inquiry. We have forwarded this to our author support team and they will follow up with you shortly.",
        "type": InquiryType.AUTHOR,
        "tags": ["handoff"],
    },
    {
        "id": "stock_check_started",
        "title": "Stock Check Started",
        "body": "We are checking current stock availability with our warehouse team. We will update you as soon as confirmation is complete.",
        "type": InquiryType.STOCK,
        "tags": ["inventory"],
    },
    {
        "id": "legal_review_started",
        "title": "Legal Review Started",
        "body": "Your request has been escalated to our legal review team. We will share an update as soon as their review is complete.",
        "type": InquiryType.LEGAL,
        "tags": ["escalation"],
    },
]


# =============================================================================
# Store availability
# =============================================================================


def is_missing_table_error(error: DBAPIError) -> bool:
    """True when ``error`` reports the template table as not provisioned."""
    orig = error.orig
    if getattr(orig, "pgcode", None) == _UNDEFINED_TABLE or getattr(orig, "sqlstate", None) == _UNDEFINED_TABLE:
        return True
    message = str(orig if orig is not None else error).lower()
    return QuickReplyTemplate.__tablename__ in message and any(
        marker in message for marker in _MISSING_TABLE_MARKERS
    )


@contextmanager
def _template_store(db: Session, action: str, actor: ActorContext) -> Iterator[None]:
    """Roll back and raise TemplatesUnavailableError when the table is missing."""
    try:
        yield
    except DBAPIError as exc:
        db.rollback()
        if is_missing_table_error(exc):
            logger.warning(
                "Quick reply template store unavailable",
                extra=build_log_context(user_id=actor.user_id, action=action),
            )
            raise TemplatesUnavailableError(
                "Quick reply templates are temporarily unavailable. Please run database migrations."
            ) from exc
        raise
    except SQLAlchemyError:
        db.rollback()
        raise


def ensure_default_templates(db: Session) -> bool:
    """
    Seed the default templates when the table is empty.

    Returns False when the table is not provisioned. Losing a seeding race
    to a concurrent request counts as seeded.
    """
    try:
        if db.query(QuickReplyTemplate.id).first() is not None:
            return True
        db.add_all(QuickReplyTemplate(**template) for template in DEFAULT_TEMPLATES)
        db.commit()
        return True
    except IntegrityError:
        db.rollback()
        logger.info("Default quick reply templates already seeded by another request")
        return True
    except DBAPIError as exc:
        db.rollback()
        if is_missing_table_error(exc):
            logger.warning("Quick reply template table missing; listing degrades to empty")
            return False
        raise


def to_read(template: QuickReplyTemplate) -> QuickReplyTemplateRead:
    return QuickReplyTemplateRead(
        id=template.id,
        title=template.title,
        body=template.body,
        type=template.type.value if template.type else COMMON_TEMPLATE_TYPE,
        tags=list(template.tags or []),
    )


def _stored_type(value: InquiryType | str | None) -> InquiryType | None:
    if value is None or value == COMMON_TEMPLATE_TYPE:
        return None
    return InquiryType(value)


# =============================================================================
# CRUD
# =============================================================================


def list_templates(
    db: Session,
    actor: ActorContext,
    type: InquiryType | None = None,
) -> list[QuickReplyTemplateRead]:
    """Templates for ``type`` plus the COMMON ones, oldest first."""
    actor_service.require_any_permission(actor, _POLICY.keys())

    if not ensure_default_templates(db):
        return []

    query = db.query(QuickReplyTemplate)
    if type is not None:
        query = query.filter(
            or_(QuickReplyTemplate.type.is_(None), QuickReplyTemplate.type == type)
        )
    try:
        templates = query.order_by(
            QuickReplyTemplate.created_at.asc(), QuickReplyTemplate.id.asc()
        ).all()
    except DBAPIError as exc:
        db.rollback()
        if is_missing_table_error(exc):
            return []
        raise
    return [to_read(template) for template in templates]


def create_template(
    db: Session,
    actor: ActorContext,
    data: QuickReplyTemplateCreate,
) -> QuickReplyTemplateRead:
    actor_service.require_any_permission(actor, _POLICY.keys("manage"))

    template = QuickReplyTemplate(
        id=f"custom_{uuid.uuid4()}",
        title=data.title,
        body=data.body,
        type=_stored_type(data.type),
        tags=data.tags or [],
        created_by_user_id=actor.user_id,
    )
    with _template_store(db, "create_template", actor):
        db.add(template)
        db.commit()
        db.refresh(template)

    logger.info(
        "Quick reply template created",
        extra=build_log_context(user_id=actor.user_id, action="create_template"),
    )
    return to_read(template)


def _get_template_or_404(db: Session, template_id: str) -> QuickReplyTemplate:
    template = db.get(QuickReplyTemplate, template_id)
    if template is None:
        raise InquiryNotFoundError("Template not found")
    return template


def update_template(
    db: Session,
    actor: ActorContext,
    template_id: str,
    data: QuickReplyTemplateUpdate,
) -> QuickReplyTemplateRead:
    """Apply the fields present in ``data``; ``type`` COMMON or null clears the type."""
    actor_service.require_any_permission(actor, _POLICY.keys("manage"))

    with _template_store(db, "update_template", actor):
        template = _get_template_or_404(db, template_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("title") is not None:
            template.title = updates["title"]
        if updates.get("body") is not None:
            template.body = updates["body"]
        if "type" in updates:
            template.type = _stored_type(updates["type"])
        if updates.get("tags") is not None:
            template.tags = updates["tags"]
        db.commit()
        db.refresh(template)

    logger.info(
        "Quick reply template updated",
        extra=build_log_context(user_id=actor.user_id, action="update_template"),
    )
    return to_read(template)


def delete_template(db: Session, actor: ActorContext, template_id: str) -> None:
    actor_service.require_any_permission(actor, _POLICY.keys("manage"))

    with _template_store(db, "delete_template", actor):
        template = _get_template_or_404(db, template_id)
        db.delete(template)
        db.commit()

    logger.info(
        "Quick reply template deleted",
        extra=build_log_context(user_id=actor.user_id, action="delete_template"),
    )
