"""Department and staff ORM models (identity source for permission resolution)."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    false,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsdesk.db.base import Base, utcnow
from opsdesk.db.enums import StaffStatus
from opsdesk.db.models._types import enum_type

if TYPE_CHECKING:
    from opsdesk.db.models import User


class Department(Base):
    """
    An operational department that owns inquiry queues.

    ``access_prefix`` ties the department to a permission namespace
    (``support``, ``finance``...) and its cross-department access policy.
    ``can_view_all_departments`` grants its staff an organisation-wide staff view.
    """

    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    access_prefix: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, server_default=true(), default=True, nullable=False
    )
    can_view_all_departments: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    staff: Mapped[list["StaffProfile"]] = relationship(back_populates="department")


class StaffProfile(Base):
    """Links a user to a department. Only ACTIVE profiles count."""

    __tablename__ = "staff_profiles"
    __table_args__ = (
        Index("idx_staff_profiles_user_status", "user_id", "status"),
        Index("idx_staff_profiles_department_status", "department_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    department_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[StaffStatus] = mapped_column(
        enum_type(StaffStatus, name="staff_status"),
        default=StaffStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="staff_profiles")
    department: Mapped["Department"] = relationship(back_populates="staff")
    assignments: Mapped[list["StaffRoleAssignment"]] = relationship(
        back_populates="staff_profile"
    )


class StaffRole(Base):
    """A named bundle of permission keys."""

    __tablename__ = "staff_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    permissions: Mapped[list["StaffRolePermission"]] = relationship(
        back_populates="role", cascade="all, delete-orphan"
    )


class StaffRolePermission(Base):
    """Permission key granted by a staff role. Keys outside the catalog are kept but inert."""

    __tablename__ = "staff_role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_key", name="uq_staff_role_permission"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("staff_roles.id", ondelete="CASCADE"), nullable=False
    )
    permission_key: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped["StaffRole"] = relationship(back_populates="permissions")


class StaffRoleAssignment(Base):
    """Time-bounded grant of a staff role to a staff profile."""

    __tablename__ = "staff_role_assignments"
    __table_args__ = (
        Index("idx_staff_role_assignments_profile", "staff_profile_id", "effective_from"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    staff_profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("staff_profiles.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("staff_roles.id", ondelete="CASCADE"), nullable=False
    )
    effective_from: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    effective_to: Mapped[datetime | None] = mapped_column(nullable=True)

    staff_profile: Mapped["StaffProfile"] = relationship(back_populates="assignments")
    role: Mapped["StaffRole"] = relationship()
