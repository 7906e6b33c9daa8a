"""Staff and department enums."""

from enum import Enum


class StaffStatus(str, Enum):
    """Workflow status of a staff profile. Only ACTIVE profiles count."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"
