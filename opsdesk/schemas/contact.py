"""Inbound contact-form schema."""

from pydantic import BaseModel, EmailStr, Field

from opsdesk.db.enums import ContactType


class ContactSubmission(BaseModel):
    """A public contact-form submission to be routed as an inquiry."""

    type: ContactType
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    subject: str | None = Field(None, max_length=180)
    message: str = Field(..., min_length=1)
