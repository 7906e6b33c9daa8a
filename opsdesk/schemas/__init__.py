"""Pydantic schemas for service payloads and API responses."""

from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.contact import ContactSubmission
from opsdesk.schemas.inquiry import (
    AuditRead,
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
    InquiryOverview,
    InquiryRead,
    InquiryStatusUpdate,
    OverviewTotals,
    StaffPerformance,
)
from opsdesk.schemas.quick_reply import (
    QuickReplyTemplateCreate,
    QuickReplyTemplateRead,
    QuickReplyTemplateUpdate,
)
from opsdesk.schemas.staff import StaffDirectoryEntry

__all__ = [
    "ActorContext",
    "AuditRead",
    "ContactSubmission",
    "InquiryAssign",
    "InquiryCreate",
    "InquiryEscalate",
    "InquiryListItem",
    "InquiryListParams",
    "InquiryListResponse",
    "InquiryMessageCreate",
    "InquiryMessageRead",
    "InquiryNoteCreate",
    "InquiryNoteRead",
    "InquiryOverview",
    "InquiryRead",
    "InquiryStatusUpdate",
    "OverviewTotals",
    "QuickReplyTemplateCreate",
    "QuickReplyTemplateRead",
    "QuickReplyTemplateUpdate",
    "StaffDirectoryEntry",
    "StaffPerformance",
]
