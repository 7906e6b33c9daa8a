"""Identity ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Uuid, func, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsdesk.db.base import Base, utcnow

if TYPE_CHECKING:
    from opsdesk.db.models import StaffProfile


class User(Base):
    """
    An authenticated identity.

    ``role`` holds the account role (user / admin / super_admin).
    Staff capabilities come from the user's staff profile, not the role.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="user")
    is_active: Mapped[bool] = mapped_column(
        Boolean, server_default=true(), default=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    staff_profiles: Mapped[list["StaffProfile"]] = relationship(back_populates="user")
