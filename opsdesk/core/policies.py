"""Centralized any-of permission groups for inquiry actions."""

from dataclasses import dataclass, field

from opsdesk.core.permissions import PermissionKey as P


@dataclass(frozen=True)
class ResourcePolicy:
    """Default permission group + per-action groups for a resource (any-of semantics)."""

    default: tuple[P, ...]
    actions: dict[str, tuple[P, ...]] = field(default_factory=dict)

    def keys(self, action: str | None = None) -> tuple[str, ...]:
        group = self.default if action is None else self.actions[action]
        return tuple(permission.value for permission in group)


_REPLY = (
    P.SUPPORT_INQUIRIES_REPLY,
    P.FINANCE_INQUIRIES_REPLY,
    P.MARKETING_INQUIRIES_REPLY,
    P.MARKETING_INQUIRIES_MANAGE,
)

_ASSIGN = (
    P.SUPPORT_INQUIRIES_ASSIGN,
    P.FINANCE_INQUIRIES_MANAGE,
    P.MARKETING_INQUIRIES_MANAGE,
)

_ESCALATE = (
    P.SUPPORT_INQUIRIES_ESCALATE,
    P.FINANCE_INQUIRIES_MANAGE,
    P.MARKETING_INQUIRIES_MANAGE,
)

# Any staff-side workflow permission (notes, status updates)
_WORKFLOW = (
    P.SUPPORT_INQUIRIES_REPLY,
    P.SUPPORT_INQUIRIES_ASSIGN,
    P.SUPPORT_INQUIRIES_ESCALATE,
    P.FINANCE_INQUIRIES_MANAGE,
    P.MARKETING_INQUIRIES_REPLY,
    P.MARKETING_INQUIRIES_MANAGE,
    P.DEPARTMENT_INQUIRIES_REPLY,
)


POLICIES: dict[str, ResourcePolicy] = {
    "inquiries": ResourcePolicy(
        default=(P.INQUIRIES_VIEW,),
        actions={
            "create": (P.INQUIRIES_CREATE,),
            "view_self": (P.INQUIRIES_VIEW,),
            "view_department": (
                P.SUPPORT_INQUIRIES_VIEW,
                P.FINANCE_INQUIRIES_VIEW,
                P.MARKETING_INQUIRIES_VIEW,
            ),
            "view_assigned": (P.DEPARTMENT_INQUIRIES_VIEW,),
            "reply": _REPLY + (P.DEPARTMENT_INQUIRIES_REPLY,),
            "reply_department": _REPLY,
            "reply_assigned": (P.DEPARTMENT_INQUIRIES_REPLY,),
            "note": _WORKFLOW,
            "assign": _ASSIGN,
            "escalate": _ESCALATE,
            "change_status": _WORKFLOW,
        },
    ),
    "quick_reply_templates": ResourcePolicy(
        default=(
            P.SUPPORT_INQUIRIES_VIEW,
            P.SUPPORT_INQUIRIES_REPLY,
            P.FINANCE_INQUIRIES_VIEW,
            P.FINANCE_INQUIRIES_REPLY,
            P.MARKETING_INQUIRIES_VIEW,
            P.MARKETING_INQUIRIES_REPLY,
            P.MARKETING_INQUIRIES_MANAGE,
            P.DEPARTMENT_INQUIRIES_VIEW,
            P.DEPARTMENT_INQUIRIES_REPLY,
            P.INQUIRIES_VIEW,
        ),
        actions={
            "manage": (
                P.SUPPORT_INQUIRIES_ASSIGN,
                P.SUPPORT_INQUIRIES_ESCALATE,
                P.FINANCE_INQUIRIES_MANAGE,
                P.MARKETING_INQUIRIES_MANAGE,
                P.ADMIN_PERMISSION_MANAGE,
            ),
        },
    ),
    "staff": ResourcePolicy(default=(P.STAFF_VIEW,)),
}


def get_policy(resource: str) -> ResourcePolicy:
    """Fetch a resource policy or raise KeyError."""
    return POLICIES[resource]
