"""Identity-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Account roles with increasing privilege levels.

    - USER: Customers and staff; staff capabilities come from role assignments
    - ADMIN: Business admin (every catalog permission except restricted ones)
    - SUPER_ADMIN: Platform owner (wildcard, holds restricted permissions)
    """

    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


# Roles that satisfy scope checks through elevated privilege
BYPASS_ROLES = {Role.ADMIN, Role.SUPER_ADMIN}
