"""Domain error kinds raised by the inquiry core.

Every error carries a ``kind`` so transports can map it without inspecting
messages. Messages never include department or staff identifiers.
"""


class InquiryServiceError(Exception):
    """Base exception for inquiry core errors."""

    kind = "error"
    retryable = False


class InquiryNotFoundError(InquiryServiceError):
    """Inquiry, department, staff profile or template not found (or inactive)."""

    kind = "not_found"


class PermissionDeniedError(InquiryServiceError):
    """Actor lacks the required capability or scope."""

    kind = "forbidden"


class InvalidInquiryStateError(InquiryServiceError):
    """Operation not valid for the inquiry's current status."""

    kind = "invalid_state"


class InquiryConflictError(InquiryServiceError):
    """Concurrent change detected while applying the mutation."""

    kind = "conflict"


class TemplatesUnavailableError(InquiryServiceError):
    """Quick-reply template store is not provisioned yet."""

    kind = "unavailable"
    retryable = True
