"""
Employee assignment for bookings without a staff preference
"""
import logging
from datetime import time
from typing import Dict, Sequence
from booking_engine.errors import NoAvailabilityError
from booking_engine.scheduling.calendar import EmployeeDay

logger = logging.getLogger(__name__)


def pick_employee(
    candidate_ids: Sequence[int],
    days: Dict[int, EmployeeDay],
    start: time,
    end: time,
) -> int:
    """
    Pick the first candidate free for [start, end).

    Candidates are tried in the order given, which callers take from the
    service's explicit assignment order. Nothing is written.

    Raises:
        NoAvailabilityError: if no candidate has a covering window and a free calendar
    """
    for employee_id in candidate_ids:
        day = days.get(employee_id)
        if day is None:
            continue
        if day.covering_window(start, end) is None:
            logger.debug("Employee %s not scheduled for %s-%s", employee_id, start, end)
            continue
        if day.conflicts(start, end):
            logger.debug("Employee %s busy for %s-%s", employee_id, start, end)
            continue
        logger.info("Assigned employee %s for %s-%s", employee_id, start, end)
        return employee_id

    raise NoAvailabilityError(
        f"No employee is available from {start.strftime('%H:%M')} to {end.strftime('%H:%M')}"
    )
