"""Staff directory endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from opsdesk.core.deps import get_current_actor, get_db
from opsdesk.schemas.auth import ActorContext
from opsdesk.schemas.staff import StaffDirectoryEntry
from opsdesk.services import staff_service

router = APIRouter()


@router.get("", response_model=list[StaffDirectoryEntry])
def list_staff(
    actor: ActorContext = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return staff_service.list_staff(db, actor)
