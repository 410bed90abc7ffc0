# barbershop/errors.py

"""
Domain errors raised by the booking logic.

Each error carries the HTTP status it maps to; the app registers a single
handler that turns them into ``{"detail": message}`` responses.
"""


class BookingError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed input, off-grid start, or a start outside business hours."""

    status_code = 400


class NotFoundError(BookingError):
    """Unknown user, service, or appointment."""

    status_code = 404


class ConflictError(BookingError):
    """Overlapping booking or duplicate unique value."""

    status_code = 409
