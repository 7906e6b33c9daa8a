"""Actor context schema."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from opsdesk.db.enums import Role


class ActorContext(BaseModel):
    """
    Who is performing an operation, resolved fresh for every call.

    An empty ``permissions`` set with no ``role`` means the identity is
    unknown or inactive; every permission check then fails.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role: Role | None = None
    permissions: frozenset[str] = frozenset()
    staff_profile_id: UUID | None = None
    department_id: UUID | None = None
    department_prefix: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.staff_profile_id is not None
