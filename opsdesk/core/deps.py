"""FastAPI dependencies for database access and actor resolution."""

from typing import Generator
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from opsdesk.db.session import SessionLocal
from opsdesk.schemas.auth import ActorContext
from opsdesk.services import actor_service

# Set by the upstream authentication gateway
USER_ID_HEADER = "X-User-Id"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
    db: Session = Depends(get_db),
) -> ActorContext:
    """
    Resolve the calling actor from the gateway identity header.

    Raises:
        HTTPException 401: Header missing or malformed

    Unknown or inactive identities resolve to an empty context; the first
    permission check then fails with 403.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid identity header")
    return actor_service.resolve_actor(db, user_id)
