"""Public contact-form endpoint."""

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from opsdesk.core.deps import get_db
from opsdesk.schemas.contact import ContactSubmission
from opsdesk.services import contact_intake_service

router = APIRouter()


class ContactReceipt(BaseModel):
    routed: bool
    inquiry_id: UUID | None = None
    department_id: UUID | None = None


@router.post("", response_model=ContactReceipt, status_code=202)
def submit_contact(data: ContactSubmission, db: Session = Depends(get_db)):
    """Accept a contact-form submission and route it to a department queue."""
    inquiry = contact_intake_service.submit_contact(db, data)
    if inquiry is None:
        return ContactReceipt(routed=False)
    return ContactReceipt(routed=True, inquiry_id=inquiry.id, department_id=inquiry.department_id)
