"""Inquiry lifecycle enums."""

from enum import Enum


class InquiryType(str, Enum):
    """Customer inquiry category."""

    ORDER = "order"
    PAYMENT = "payment"
    AUTHOR = "author"
    STOCK = "stock"
    LEGAL = "legal"
    OTHER = "other"


class InquiryPriority(str, Enum):
    """Inquiry priority level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class InquiryStatus(str, Enum):
    """Inquiry lifecycle status."""

    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    ESCALATED = "ESCALATED"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class InquirySenderType(str, Enum):
    """Who wrote an inquiry message."""

    USER = "USER"
    STAFF = "STAFF"


class InquiryAuditAction(str, Enum):
    """State-changing actions recorded in the inquiry audit trail."""

    CREATED = "CREATED"
    ASSIGNED = "ASSIGNED"
    ESCALATED = "ESCALATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    CLOSED = "CLOSED"


class ContactType(str, Enum):
    """Inbound contact-form channel."""

    SUPPORT = "support"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    BUSINESS = "business"
    LEGAL = "legal"


# Template type label meaning "usable for every inquiry type"
COMMON_TEMPLATE_TYPE = "COMMON"

DEFAULT_INQUIRY_PRIORITY = InquiryPriority.MEDIUM
