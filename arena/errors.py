"""
Domain errors for the booking core.

Services raise these; the API layer renders them through the exception
handler registered in main.py. Each error carries a stable ``code`` so
callers can branch on the kind of failure without parsing messages.
"""

from typing import Any, Optional


class DomainError(Exception):
    """Base class for all booking-domain failures"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code, "details": self.details}


class NotFoundError(DomainError):
    """Court, booking, waitlist entry or membership tier is missing"""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(f"{resource} not found", code="NOT_FOUND", details=details)


class ConflictError(DomainError):
    """The request collides with existing state"""

    status_code = 409


class SlotConflictError(ConflictError):
    """A confirmed booking already occupies the requested slot"""

    def __init__(self, court_id: int, booking_date: str, start_time: int):
        super().__init__(
            "This time slot is already booked.",
            code="SLOT_CONFLICT",
            details={
                "court_id": court_id,
                "booking_date": booking_date,
                "start_time": start_time,
            },
        )


class UnauthorizedError(DomainError):
    """The actor has no rights over the target record"""

    status_code = 403

    def __init__(self, message: str = "You are not authorized to perform this action."):
        super().__init__(message, code="UNAUTHORIZED")


class ValidationError(DomainError):
    """Malformed date, time or duration input"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field} if field else {})


class StructuralAbort(Exception):
    """
    Raised inside recurring expansion to stop the whole series.

    Wraps the error that made further occurrences pointless (missing court,
    bad input) so the expander can tell it apart from a per-date slot
    conflict. Never reaches the API layer: the expander re-raises ``cause``.
    """

    def __init__(self, occurrence_date: str, cause: DomainError):
        self.occurrence_date = occurrence_date
        self.cause = cause
        super().__init__(f"Series aborted at {occurrence_date}: {cause.message}")
