"""Pure status-transition rules for the inquiry lifecycle.

Kept free of persistence so every rule is unit-testable in isolation.
"""

from opsdesk.db.enums import InquiryAuditAction, InquirySenderType, InquiryStatus

UNRESOLVED_STATUSES: frozenset[InquiryStatus] = frozenset(
    {
        InquiryStatus.OPEN,
        InquiryStatus.ASSIGNED,
        InquiryStatus.IN_PROGRESS,
        InquiryStatus.ESCALATED,
    }
)
SOLVED_STATUSES: frozenset[InquiryStatus] = frozenset(
    {InquiryStatus.RESOLVED, InquiryStatus.CLOSED}
)

# Statuses a reply moves forward to IN_PROGRESS
_REPLY_ADVANCES = frozenset({InquiryStatus.OPEN, InquiryStatus.ASSIGNED})


def is_terminal(status: InquiryStatus) -> bool:
    return status in SOLVED_STATUSES


def next_status_on_message(
    current: InquiryStatus, sender_type: InquirySenderType
) -> InquiryStatus:
    """
    Status after a message is posted.

    Customer and staff replies alike move OPEN/ASSIGNED to IN_PROGRESS;
    any other status is left untouched.
    """
    if current in _REPLY_ADVANCES:
        return InquiryStatus.IN_PROGRESS
    return current


def should_auto_assign(current: InquiryStatus) -> bool:
    """Whether a staff touch on an unassigned inquiry claims it."""
    return not is_terminal(current)


def can_transition(current: InquiryStatus, target: InquiryStatus) -> bool:
    """
    Explicit status-update policy.

    - Non-terminal statuses may jump to any status.
    - RESOLVED may only be closed.
    - CLOSED is final.
    """
    if current == InquiryStatus.CLOSED:
        return False
    if current == InquiryStatus.RESOLVED:
        return target == InquiryStatus.CLOSED
    return True


def audit_action_for_status(target: InquiryStatus) -> InquiryAuditAction:
    if target == InquiryStatus.CLOSED:
        return InquiryAuditAction.CLOSED
    return InquiryAuditAction.STATUS_CHANGED
