"""
Operating Hours

Resolves the daily window and slot granularity used to enumerate candidate
slots for a company on a given date, in this order:

1. BusinessHours row for the weekday (is_closed means no slots that day)
2. Company opening_time / closing_time / slot_interval_minutes
3. Application settings defaults

A non-positive company slot interval falls back to the settings default.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional
from sqlalchemy.orm import Session
from booking_engine.config import settings
from booking_engine.models import BusinessHours, Company
from booking_engine.scheduling.timeutils import add_minutes, from_minutes, parse_time, to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperatingHours:
    """Daily operating window [open_time, close_time) stepped every slot_interval_minutes"""

    open_time: time
    close_time: time
    slot_interval_minutes: int

    def __post_init__(self):
        if self.slot_interval_minutes <= 0:
            raise ValueError("slot_interval_minutes must be positive")
        if self.open_time >= self.close_time:
            raise ValueError("open_time must be before close_time")

    def candidate_starts(self, duration_minutes: int) -> List[time]:
        """All grid starts whose slot of the given length ends by close_time"""
        starts = []
        close = to_minutes(self.close_time)
        current = to_minutes(self.open_time)
        while current + duration_minutes <= close:
            starts.append(from_minutes(current))
            current += self.slot_interval_minutes
        return starts

    def is_bookable_start(self, start: time, duration_minutes: int) -> bool:
        """start lies on the grid and the slot fits before close_time"""
        offset = to_minutes(start) - to_minutes(self.open_time)
        if offset < 0 or offset % self.slot_interval_minutes:
            return False
        end = add_minutes(start, duration_minutes)
        return end is not None and end <= self.close_time


def default_operating_hours() -> OperatingHours:
    return OperatingHours(
        open_time=parse_time(settings.default_opening_time, "default_opening_time"),
        close_time=parse_time(settings.default_closing_time, "default_closing_time"),
        slot_interval_minutes=settings.default_slot_interval_minutes,
    )


def resolve_operating_hours(db: Session, company: Company, day: date) -> Optional[OperatingHours]:
    """
    Operating hours for a company on a date, or None when it is closed.
    """
    defaults = default_operating_hours()
    open_time = company.opening_time or defaults.open_time
    close_time = company.closing_time or defaults.close_time
    interval = company.slot_interval_minutes or defaults.slot_interval_minutes
    if interval <= 0:
        logger.warning(
            "Company %s has invalid slot interval %s; using %s minutes",
            company.id, interval, defaults.slot_interval_minutes,
        )
        interval = defaults.slot_interval_minutes

    weekday_hours = (
        db.query(BusinessHours)
        .filter(
            BusinessHours.company_id == company.id,
            BusinessHours.day_of_week == day.weekday(),
        )
        .first()
    )
    if weekday_hours is not None:
        if weekday_hours.is_closed:
            return None
        open_time = weekday_hours.open_time or open_time
        close_time = weekday_hours.close_time or close_time

    if open_time >= close_time:
        return None

    return OperatingHours(open_time=open_time, close_time=close_time, slot_interval_minutes=interval)
