class BookingValidationError(ValueError):
    """Raised when a request is missing or has a malformed required field."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SlotUnavailableError(BookingValidationError):
    """Raised when the requested start is not among the offered slots."""
    pass


class CalendarUpstreamError(RuntimeError):
    """Raised when the calendar service fails (network errors, non-2xx responses)."""

    def __init__(self, message: str, status: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class CalendarEventNotFound(CalendarUpstreamError):
    """Raised when the calendar service reports the event id does not exist."""
    pass


class UnauthorizedError(PermissionError):
    """Raised for a bad admin bearer token or an invalid/expired cancel token."""
    pass
