"""Inquiries router - API endpoints for the inquiry lifecycle."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from opsdesk.core.deps import get_current_actor, get_db
from opsdesk.db.enums import InquiryPriority, InquiryStatus, InquiryType
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.inquiry import (
    AuditRead,
    InquiryAssign,
    InquiryCreate,
    InquiryEscalate,
    InquiryListParams,
    InquiryListResponse,
    InquiryMessageCreate,
    InquiryNoteCreate,
    InquiryNoteRead,
    InquiryOverview,
    InquiryRead,
    InquiryStatusUpdate,
)
from opsdesk.schemas.quick_reply import (
    QuickReplyTemplateCreate,
    QuickReplyTemplateRead,
    QuickReplyTemplateUpdate,
)
from opsdesk.services import inquiry_analytics_service, inquiry_service, quick_reply_service
from opsdesk.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.post("", response_model=InquiryRead, status_code=201)
def create_inquiry(
    data: InquiryCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """File a new inquiry in the customer support queue."""
    inquiry = inquiry_service.create_inquiry(db, actor, data)
    return inquiry_service.serialize_inquiry(inquiry, actor)


@router.get("", response_model=InquiryListResponse)
def list_inquiries(
    status: InquiryStatus | None = None,
    type: InquiryType | None = None,
    priority: InquiryPriority | None = None,
    q: str | None = Query(None, max_length=180, description="Subject search"),
    pagination: PaginationParams = Depends(get_pagination),
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List inquiries visible to the caller."""
    params = InquiryListParams(
        status=status,
        type=type,
        priority=priority,
        q=q,
        page=pagination.page,
        limit=pagination.limit,
    )
    return inquiry_service.list_inquiries(db, actor, params)


@router.get("/overview", response_model=InquiryOverview)
def get_overview(
    days: int | None = Query(None, ge=1, le=365, description="Limit metrics to last N days"),
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Admin-only inquiry totals and staff leaderboard."""
    return inquiry_analytics_service.get_overview(db, actor, days)


# =============================================================================
# Quick-reply templates
# =============================================================================


@router.get("/templates", response_model=list[QuickReplyTemplateRead])
def list_templates(
    type: InquiryType | None = None,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return quick_reply_service.list_templates(db, actor, type)


@router.post("/templates", response_model=QuickReplyTemplateRead, status_code=201)
def create_template(
    data: QuickReplyTemplateCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return quick_reply_service.create_template(db, actor, data)


@router.patch("/templates/{template_id}", response_model=QuickReplyTemplateRead)
def update_template(
    template_id: str,
    data: QuickReplyTemplateUpdate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return quick_reply_service.update_template(db, actor, template_id, data)


@router.delete("/templates/{template_id}", status_code=204)
def delete_template(
    template_id: str,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    quick_reply_service.delete_template(db, actor, template_id)
    return Response(status_code=204)


# =============================================================================
# Single inquiry
# =============================================================================


@router.get("/{inquiry_id}", response_model=InquiryRead)
def get_inquiry(
    inquiry_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Inquiry with its messages; internal notes are omitted for customers."""
    return inquiry_service.get_inquiry(db, actor, inquiry_id)


@router.post("/{inquiry_id}/messages", response_model=InquiryRead)
def add_message(
    inquiry_id: UUID,
    data: InquiryMessageCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    inquiry = inquiry_service.add_message(db, actor, inquiry_id, data)
    return inquiry_service.serialize_inquiry(inquiry, actor)


@router.post("/{inquiry_id}/notes", response_model=InquiryNoteRead, status_code=201)
def add_internal_note(
    inquiry_id: UUID,
    data: InquiryNoteCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return inquiry_service.add_internal_note(db, actor, inquiry_id, data)


@router.post("/{inquiry_id}/assign", response_model=InquiryRead)
def assign_inquiry(
    inquiry_id: UUID,
    data: InquiryAssign,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    inquiry = inquiry_service.assign_inquiry(db, actor, inquiry_id, data)
    return inquiry_service.serialize_inquiry(inquiry, actor)


@router.post("/{inquiry_id}/escalate", response_model=InquiryRead)
def escalate_inquiry(
    inquiry_id: UUID,
    data: InquiryEscalate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    inquiry = inquiry_service.escalate_inquiry(db, actor, inquiry_id, data)
    return inquiry_service.serialize_inquiry(inquiry, actor)


@router.patch("/{inquiry_id}/status", response_model=InquiryRead)
def update_status(
    inquiry_id: UUID,
    data: InquiryStatusUpdate,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    inquiry = inquiry_service.update_status(db, actor, inquiry_id, data)
    return inquiry_service.serialize_inquiry(inquiry, actor)


@router.get("/{inquiry_id}/audit", response_model=list[AuditRead])
def list_audit(
    inquiry_id: UUID,
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Audit trail, newest first."""
    return inquiry_service.list_audit(db, actor, inquiry_id)
