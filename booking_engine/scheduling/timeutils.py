"""
Date and time-of-day helpers shared by the scheduling modules.

Time-of-day arithmetic is done in minutes since midnight; a result that
would reach or pass midnight is not a valid time of day and is reported as
None.
"""
from datetime import date, datetime, time
from typing import Optional, Union
from booking_engine.errors import ValidationError

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    return time(hour=minutes // 60, minute=minutes % 60)


def add_minutes(value: time, minutes: int) -> Optional[time]:
    """Shift a time of day; None when the result does not fit in the same day"""
    total = to_minutes(value) + minutes
    if total < 0 or total >= MINUTES_PER_DAY:
        return None
    return from_minutes(total)


def parse_date(value: Union[date, str, None], field_name: str = "date") -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        ValidationError: if value is missing or malformed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")


def parse_time(value: Union[time, str, None], field_name: str = "time") -> time:
    """
    Parse an HH:MM (or HH:MM:00) time of day.

    Raises:
        ValidationError: if value is missing, malformed or not on a whole minute
    """
    if isinstance(value, time):
        parsed = value
    elif not value:
        raise ValidationError(f"{field_name} is required")
    else:
        parsed = None
        text = str(value).strip()
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                parsed = datetime.strptime(text, fmt).time()
                break
            except ValueError:
                continue
        if parsed is None:
            raise ValidationError(f"Invalid {field_name} format. Use HH:MM")

    if parsed.second or parsed.microsecond:
        raise ValidationError(f"{field_name} must be on a whole minute. Use HH:MM")
    return parsed


def format_time(value: time) -> str:
    return value.strftime("%H:%M")
