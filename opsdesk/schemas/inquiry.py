"""Pydantic schemas for the inquiry lifecycle."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from opsdesk.core.config import settings
from opsdesk.db.enums import (
    DEFAULT_INQUIRY_PRIORITY,
    InquiryAuditAction,
    InquiryPriority,
    InquirySenderType,
    InquiryStatus,
    InquiryType,
)


# =============================================================================
# Requests
# =============================================================================


class InquiryCreate(BaseModel):
    """Request schema for filing an inquiry."""

    type: InquiryType
    subject: str = Field(..., min_length=1, max_length=180)
    message: str = Field(..., min_length=1)
    priority: InquiryPriority = DEFAULT_INQUIRY_PRIORITY


class InquiryListParams(BaseModel):
    """Filters and paging for inquiry listing."""

    status: InquiryStatus | None = None
    type: InquiryType | None = None
    priority: InquiryPriority | None = None
    q: str | None = Field(None, max_length=180, description="Subject search")
    page: int = Field(1, ge=1)
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)


class InquiryMessageCreate(BaseModel):
    message: str = Field(..., min_length=1)


class InquiryNoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


class InquiryAssign(BaseModel):
    staff_profile_id: UUID


class InquiryEscalate(BaseModel):
    to_department_id: UUID


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


# =============================================================================
# Responses
# =============================================================================


class InquiryMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    sender_type: InquirySenderType
    message: str
    created_at: datetime


class InquiryNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    inquiry_id: UUID
    staff_id: UUID | None = None
    author_user_id: UUID
    note: str
    created_at: datetime


class AuditRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    inquiry_id: UUID
    action: InquiryAuditAction
    performed_by_user_id: UUID
    from_department_id: UUID | None = None
    to_department_id: UUID | None = None
    created_at: datetime


class InquiryListItem(BaseModel):
    """Inbox row for an inquiry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: InquiryType
    subject: str
    status: InquiryStatus
    priority: InquiryPriority
    department_id: UUID
    created_by_user_id: UUID
    assigned_to_staff_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class InquiryRead(InquiryListItem):
    """
    Full inquiry with its conversation.

    ``internal_notes`` is None for customers; staff and bypass actors get
    the notes newest first.
    """

    messages: list[InquiryMessageRead] = []
    internal_notes: list[InquiryNoteRead] | None = None


class InquiryListResponse(BaseModel):
    items: list[InquiryListItem]
    total: int
    page: int
    limit: int


class OverviewTotals(BaseModel):
    total: int
    unresolved: int
    resolved: int
    unchecked: int
    in_charge: int


class StaffPerformance(BaseModel):
    """Per-assignee workload row for the overview leaderboard."""

    staff_profile_id: UUID
    staff_name: str
    staff_email: str
    solved_count: int = 0
    resolved_count: int = 0
    closed_count: int = 0
    active_count: int = 0
    assigned_total: int = 0


class InquiryOverview(BaseModel):
    totals: OverviewTotals
    staff_performance: list[StaffPerformance]
