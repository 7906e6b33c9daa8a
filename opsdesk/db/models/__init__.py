"""SQLAlchemy ORM models."""

from opsdesk.db.models.auth import User
from opsdesk.db.models.inquiries import (
    Inquiry,
    InquiryAudit,
    InquiryInternalNote,
    InquiryMessage,
    QuickReplyTemplate,
)
from opsdesk.db.models.notifications import Notification
from opsdesk.db.models.staff import (
    Department,
    StaffProfile,
    StaffRole,
    StaffRoleAssignment,
    StaffRolePermission,
)

__all__ = [
    "Department",
    "Inquiry",
    "InquiryAudit",
    "InquiryInternalNote",
    "InquiryMessage",
    "Notification",
    "QuickReplyTemplate",
    "StaffProfile",
    "StaffRole",
    "StaffRoleAssignment",
    "StaffRolePermission",
    "User",
]
