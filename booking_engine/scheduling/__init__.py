"""
Scheduling engine: availability, assignment, customer resolution and the
authoritative booking commit.
"""
from booking_engine.scheduling.overlap import overlaps
from booking_engine.scheduling.booking import BookingResult, list_available_slots, submit_booking
from booking_engine.scheduling.lifecycle import (
    cancel_appointment,
    complete_appointment,
    get_appointment,
    update_payment_status,
)

__all__ = [
    "overlaps",
    "BookingResult",
    "list_available_slots",
    "submit_booking",
    "get_appointment",
    "complete_appointment",
    "cancel_appointment",
    "update_payment_status",
]
