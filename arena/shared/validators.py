"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"
HOUR_MINUTE_PATTERN = re.compile(r"^(([01]?\d|2[0-3]):[0-5]\d|24:00)$")

# Bookings are made in quarter-hour increments, up to a full day
DURATION_STEP_MINUTES = 15
MAX_DURATION_MINUTES = 24 * 60


def parse_booking_date(value: str) -> date:
    """
    Parse a calendar date key.

    Args:
        value: Date string in YYYY-MM-DD format

    Returns:
        The calendar date (no time zone conversion is applied)

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    if not value or not isinstance(value, str):
        raise ValueError("Date is required (YYYY-MM-DD)")

    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from e

    # strptime accepts single-digit months/days; keys must be canonical
    if parsed.strftime(DATE_FORMAT) != value:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")

    return parsed


def format_booking_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def validate_start_hour(value: int) -> int:
    """Start times are whole hours of the day"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Start time must be an integer hour")
    if value < 0 or value > 23:
        raise ValueError("Start time must be between 0 and 23")
    return value


def validate_duration(value: int) -> int:
    """
    Validate a booking duration in minutes.

    Raises:
        ValueError: If the duration is not a positive multiple of 15 minutes
            no longer than a day
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("Duration must be an integer number of minutes")
    if value <= 0:
        raise ValueError("Duration must be greater than 0")
    if value % DURATION_STEP_MINUTES != 0:
        raise ValueError(f"Duration must be a multiple of {DURATION_STEP_MINUTES} minutes")
    if value > MAX_DURATION_MINUTES:
        raise ValueError("Duration cannot exceed 24 hours")
    return value


def validate_hour_minute(value: Optional[str]) -> Optional[str]:
    """Validate an "HH:MM" rule boundary"""
    if value is None:
        return value
    if not HOUR_MINUTE_PATTERN.match(value):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return value


def hour_prefix(value: str) -> int:
    """Hour component of an "HH:MM" string ("14:00" -> 14)"""
    return int(value.split(":")[0])


def validate_days_of_week(days: Optional[list[int]]) -> Optional[list[int]]:
    """Days are 0 (Sunday) through 6 (Saturday)"""
    if days is None:
        return days
    if not days:
        raise ValueError("At least one day of week is required")
    for day in days:
        if day < 0 or day > 6:
            raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(days))


def validate_open_hours(start: Optional[int], end: Optional[int]) -> None:
    if start is None and end is None:
        return
    if start is None or end is None:
        raise ValueError("Both opening and closing hours are required")
    if not (0 <= start < end <= 24):
        raise ValueError("Opening hours must satisfy 0 <= start < end <= 24")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """Strip formatting from a guest phone number, keeping a leading +"""
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)
    if len(digits) < 7 or len(digits) > 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return f"+{digits}" if phone.strip().startswith("+") else digits


def validate_price_per_hour(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    if value < 0:
        raise ValueError("Price per hour cannot be negative")
    return value
