"""Pydantic schemas for quick-reply templates."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from opsdesk.db.enums import InquiryType

TemplateType = InquiryType | Literal["COMMON"]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        if len(tag) > 30:
            raise ValueError("Tags must be at most 30 characters")
        stripped = tag.strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned


class QuickReplyTemplateCreate(BaseModel):
    """Request schema for a custom quick-reply template."""

    title: str = Field(..., min_length=3, max_length=100)
    body: str = Field(..., min_length=10, max_length=2000)
    type: TemplateType | None = None
    tags: list[str] | None = Field(None, max_length=10)

    @field_validator("title", "body")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class QuickReplyTemplateUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=3, max_length=100)
    body: str | None = Field(None, min_length=10, max_length=2000)
    type: TemplateType | None = None
    tags: list[str] | None = Field(None, max_length=10)

    @field_validator("title", "body")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class QuickReplyTemplateRead(BaseModel):
    id: str
    title: str
    body: str
    type: str
    tags: list[str]
