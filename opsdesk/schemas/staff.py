"""Staff directory schemas."""

from uuid import UUID

from pydantic import BaseModel

from opsdesk.db.enums import StaffStatus


class StaffDirectoryEntry(BaseModel):
    staff_profile_id: UUID
    user_id: UUID
    display_name: str
    email: str
    department_id: UUID
    department_code: str
    status: StaffStatus
