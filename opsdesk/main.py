"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from opsdesk.core.config import settings
from opsdesk.core.exceptions import InquiryServiceError
from opsdesk.core.structured_logging import configure_logging
from opsdesk.db.session import engine

configure_logging(settings.LOG_LEVEL)

# Domain error kind -> HTTP status
ERROR_STATUS_CODES = {
    "not_found": 404,
    "forbidden": 403,
    "invalid_state": 409,
    "conflict": 409,
    "unavailable": 503,
}


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Opsdesk API",
    description="Scoped permissions and inquiry routing for customer operations",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-User-Id"],
)


@app.exception_handler(InquiryServiceError)
async def inquiry_service_error_handler(request: Request, exc: InquiryServiceError):
    status_code = ERROR_STATUS_CODES.get(exc.kind, 400)
    headers = None
    if exc.retryable:
        headers = {"Retry-After": str(settings.UNAVAILABLE_RETRY_AFTER_SECONDS)}
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "kind": exc.kind},
        headers=headers,
    )


# ============================================================================
# Routers
# ============================================================================

from opsdesk.routers import contact, inquiries, staff  # noqa: E402

app.include_router(inquiries.router, prefix="/inquiries", tags=["inquiries"])
app.include_router(contact.router, prefix="/contact", tags=["contact"])
app.include_router(staff.router, prefix="/staff", tags=["staff"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
