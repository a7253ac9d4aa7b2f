"""
Booking error taxonomy

Every failure the engine reports to its callers is a BookingError subclass.
Each class carries the HTTP status the API layer answers with, so routes
never need to translate errors one by one.
"""


class BookingError(Exception):
    """Base class for all booking engine errors"""

    http_status = 400
    code = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed or missing input; raised before anything is written"""

    http_status = 422
    code = "validation_error"


class NotFoundError(BookingError):
    """Referenced company, service, employee or appointment does not exist"""

    http_status = 404
    code = "not_found"


class NoAvailabilityError(BookingError):
    """No eligible employee is free for the requested time"""

    http_status = 409
    code = "no_availability"


class SlotConflictError(BookingError):
    """
    The commit-time re-check found an overlapping appointment.

    The slot was taken after availability was listed; the caller should
    refresh availability and let the customer pick again.
    """

    http_status = 409
    code = "slot_conflict"


class InvalidStatusTransitionError(BookingError):
    """Requested appointment status change is not allowed"""

    http_status = 409
    code = "invalid_status_transition"


class CustomerResolutionError(BookingError):
    """Customer find-or-create failed outside the expected insert race"""

    http_status = 500
    code = "customer_resolution_error"


class PersistenceError(BookingError):
    """Store failure unrelated to business rules"""

    http_status = 503
    code = "persistence_error"
