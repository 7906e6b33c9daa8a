"""Pagination utilities for list endpoints."""

from dataclasses import dataclass

from fastapi import Query

from opsdesk.core.config import settings

DEFAULT_PAGE = 1


@dataclass
class PaginationParams:
    """Pagination parameters from query string."""
    page: int
    limit: int


def get_pagination(
    page: int = Query(DEFAULT_PAGE, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description=f"Items per page (max {settings.MAX_PAGE_SIZE})",
    ),
) -> PaginationParams:
    """
    Pagination dependency.

    Usage:
        @router.get("/items")
        def list_items(pagination: PaginationParams = Depends(get_pagination)):
            ...
    """
    return PaginationParams(page=page, limit=limit)
