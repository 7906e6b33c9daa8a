"""Structured logging helpers (identifiers only, never message bodies)."""

import logging
from typing import Any
from uuid import UUID


def build_log_context(
    *,
    user_id: UUID | str | None = None,
    inquiry_id: UUID | str | None = None,
    department_id: UUID | str | None = None,
    action: str | None = None,
    scope: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict with only the provided fields."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = str(user_id)
    if inquiry_id:
        context["inquiry_id"] = str(inquiry_id)
    if department_id:
        context["department_id"] = str(department_id)
    if action:
        context["action"] = action
    if scope:
        context["scope"] = scope
    return context


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
