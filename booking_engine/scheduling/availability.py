"""
Availability Service

Computes bookable slot starts for a service on a date across its eligible
employees. The result is an advisory snapshot: it can go stale before the
customer submits, and BookingCommitter re-checks everything at commit time.
"""
import logging
from datetime import time
from typing import Dict, List, Sequence
from booking_engine.scheduling.calendar import EmployeeDay
from booking_engine.scheduling.hours import OperatingHours
from booking_engine.scheduling.timeutils import add_minutes

logger = logging.getLogger(__name__)


class AvailabilityCalculator:
    """Enumerates the operating-hours grid and keeps slots some employee can serve"""

    def __init__(self, hours: OperatingHours):
        self.hours = hours

    def available_slots(
        self,
        employee_ids: Sequence[int],
        days: Dict[int, EmployeeDay],
        duration_minutes: int,
    ) -> List[time]:
        """
        Slot starts bookable by at least one eligible employee.

        Args:
            employee_ids: eligible employees, in assignment order
            days: calendar snapshot per employee for the requested date
            duration_minutes: service duration

        Returns:
            Ordered list of slot start times
        """
        if duration_minutes <= 0 or not employee_ids:
            return []

        employee_days = [days[employee_id] for employee_id in employee_ids if employee_id in days]
        if not any(day.windows for day in employee_days):
            return []

        slots = []
        for start in self.hours.candidate_starts(duration_minutes):
            end = add_minutes(start, duration_minutes)
            if end is None:
                continue
            if any(day.is_free(start, end) for day in employee_days):
                slots.append(start)

        logger.debug(
            "Computed %d slots for %d employees (duration %d min)",
            len(slots), len(employee_days), duration_minutes,
        )
        return slots
