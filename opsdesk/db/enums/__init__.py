"""Enum definitions for application constants."""

from opsdesk.db.enums.auth import BYPASS_ROLES, Role
from opsdesk.db.enums.inquiries import (
    COMMON_TEMPLATE_TYPE,
    DEFAULT_INQUIRY_PRIORITY,
    ContactType,
    InquiryAuditAction,
    InquiryPriority,
    InquirySenderType,
    InquiryStatus,
    InquiryType,
)
from opsdesk.db.enums.notifications import NotificationType
from opsdesk.db.enums.staff import StaffStatus

__all__ = [
    "BYPASS_ROLES",
    "COMMON_TEMPLATE_TYPE",
    "ContactType",
    "DEFAULT_INQUIRY_PRIORITY",
    "InquiryAuditAction",
    "InquiryPriority",
    "InquirySenderType",
    "InquiryStatus",
    "InquiryType",
    "NotificationType",
    "Role",
    "StaffStatus",
]
