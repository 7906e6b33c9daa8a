"""Notification enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Notification types for inquiry events."""

    INQUIRY_CREATED = "inquiry_created"
    INQUIRY_REPLY = "inquiry_reply"
    INQUIRY_ASSIGNED = "inquiry_assigned"
    INQUIRY_ESCALATED = "inquiry_escalated"
    INQUIRY_UPDATE = "inquiry_update"
