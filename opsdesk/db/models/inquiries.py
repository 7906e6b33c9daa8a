"""Inquiry lifecycle ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsdesk.db.base import Base, utcnow
from opsdesk.db.enums import (
    DEFAULT_INQUIRY_PRIORITY,
    InquiryAuditAction,
    InquiryPriority,
    InquirySenderType,
    InquiryStatus,
    InquiryType,
)
from opsdesk.db.models._types import enum_type

if TYPE_CHECKING:
    from opsdesk.db.models import Department, StaffProfile, User


class Inquiry(Base):
    """
    A customer-service ticket routed through departments and staff.

    Never hard-deleted; RESOLVED and CLOSED are terminal.
    ``assigned_to_staff_id``, when set, belongs to ``department_id``.
    """

    __tablename__ = "inquiries"
    __table_args__ = (
        Index("idx_inquiries_department_status", "department_id", "status"),
        Index("idx_inquiries_creator", "created_by_user_id", "updated_at"),
        Index("idx_inquiries_assignee", "assigned_to_staff_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    type: Mapped[InquiryType] = mapped_column(
        enum_type(InquiryType, name="inquiry_type"), nullable=False
    )
    subject: Mapped[str] = mapped_column(String(180), nullable=False)
    status: Mapped[InquiryStatus] = mapped_column(
        enum_type(InquiryStatus, name="inquiry_status"),
        default=InquiryStatus.OPEN,
        nullable=False,
    )
    priority: Mapped[InquiryPriority] = mapped_column(
        enum_type(InquiryPriority, name="inquiry_priority"),
        default=DEFAULT_INQUIRY_PRIORITY,
        nullable=False,
    )
    department_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False
    )
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    assigned_to_staff_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("staff_profiles.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    department: Mapped["Department"] = relationship()
    created_by: Mapped["User"] = relationship()
    assigned_to_staff: Mapped["StaffProfile | None"] = relationship()
    messages: Mapped[list["InquiryMessage"]] = relationship(
        back_populates="inquiry", order_by="InquiryMessage.created_at"
    )
    internal_notes: Mapped[list["InquiryInternalNote"]] = relationship(
        back_populates="inquiry", order_by="InquiryInternalNote.created_at.desc()"
    )
    audits: Mapped[list["InquiryAudit"]] = relationship(
        back_populates="inquiry", order_by="InquiryAudit.created_at.desc()"
    )


class InquiryMessage(Base):
    """Customer or staff message on an inquiry. Append-only."""

    __tablename__ = "inquiry_messages"
    __table_args__ = (Index("idx_inquiry_messages_inquiry", "inquiry_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inquiry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    sender_type: Mapped[InquirySenderType] = mapped_column(
        enum_type(InquirySenderType, name="inquiry_sender_type"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    inquiry: Mapped["Inquiry"] = relationship(back_populates="messages")


class InquiryInternalNote(Base):
    """Staff-only note, never shown to the customer. Append-only."""

    __tablename__ = "inquiry_internal_notes"
    __table_args__ = (Index("idx_inquiry_notes_inquiry", "inquiry_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inquiry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False
    )
    # Null when written by a bypass admin without a staff profile
    staff_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("staff_profiles.id", ondelete="SET NULL"), nullable=True
    )
    author_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    inquiry: Mapped["Inquiry"] = relationship(back_populates="internal_notes")


class InquiryAudit(Base):
    """
    Who did what to an inquiry, when, and between which departments.

    Append-only: rows are never updated or deleted.
    """

    __tablename__ = "inquiry_audits"
    __table_args__ = (
        Index("idx_inquiry_audits_inquiry", "inquiry_id", "created_at"),
        Index("idx_inquiry_audits_from_department", "action", "from_department_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inquiry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[InquiryAuditAction] = mapped_column(
        enum_type(InquiryAuditAction, name="inquiry_audit_action"), nullable=False
    )
    performed_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    from_department_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True
    )
    to_department_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    inquiry: Mapped["Inquiry"] = relationship(back_populates="audits")


class QuickReplyTemplate(Base):
    """Canned reply text. ``type`` None means usable for every inquiry type."""

    __tablename__ = "inquiry_quick_reply_templates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[InquiryType | None] = mapped_column(
        enum_type(InquiryType, name="inquiry_type"), nullable=True
    )
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )
