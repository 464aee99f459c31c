"""
Recurring booking expansion.

A recurring request becomes one allocation attempt per occurrence date,
issued sequentially through BookingAllocator. Occurrences whose slot is
already taken are skipped; the rest of the series still goes ahead. Any
other failure (missing court, bad input) stops the series and propagates.

Monthly occurrences are anchored on the first date: the n-th occurrence is
first_date + n months, clamped to the last day of shorter months. A series
starting Jan 31 therefore runs Jan 31, Feb 29 (or 28), Mar 31, Apr 30, ...
and never spills into the following month.
"""

import logging
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from ...clock import SystemClock
from ...config import DEFAULT_BOOKING_DURATION, MAX_SERIES_OCCURRENCES
from ...errors import DomainError, NotFoundError, SlotConflictError, StructuralAbort, ValidationError
from ...models import Booking
from ...shared.validators import format_booking_date, parse_booking_date
from ..courts.repository import CourtRepository
from .allocator import BookingAllocator, validate_slot_request

logger = logging.getLogger(__name__)

RECURRING_PATTERNS = ("weekly", "monthly")
_SERIES_ALPHABET = string.digits + string.ascii_lowercase


@dataclass
class SeriesResult:
    series_id: str
    created: list[Booking] = field(default_factory=list)
    total_attempted: int = 0
    skipped_dates: list[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def partial(self) -> bool:
        return self.created_count < self.total_attempted


def generate_series_id() -> str:
    """recurring-<epoch ms>-<9 base36 chars>"""
    suffix = "".join(secrets.choice(_SERIES_ALPHABET) for _ in range(9))
    return f"recurring-{int(time.time() * 1000)}-{suffix}"


def occurrence_dates(
    first_date: date, last_date: date, pattern: str, limit: int = MAX_SERIES_OCCURRENCES
) -> list[date]:
    """
    Dates from first_date through last_date inclusive.

    Raises:
        ValueError: Unknown pattern, or more than ``limit`` occurrences
    """
    if pattern not in RECURRING_PATTERNS:
        raise ValueError(f"Recurring pattern must be one of {', '.join(RECURRING_PATTERNS)}")

    dates = []
    n = 0
    while True:
        if pattern == "weekly":
            current = first_date + timedelta(days=7 * n)
        else:
            current = first_date + relativedelta(months=n)

        if current > last_date:
            break
        if len(dates) >= limit:
            raise ValueError(f"A recurring series cannot have more than {limit} occurrences")

        dates.append(current)
        n += 1

    return dates


class RecurringSeriesExpander:
    """Expands a recurring request into bookings sharing a series id"""

    def __init__(
        self,
        db: Session,
        clock: Optional[SystemClock] = None,
        allocator: Optional[BookingAllocator] = None,
    ):
        self.db = db
        self.allocator = allocator or BookingAllocator(db, clock=clock)
        self.court_repo = CourtRepository()

    def create_recurring_bookings(
        self,
        user_id: int,
        court_id: int,
        first_date: str,
        start_time: int,
        pattern: str,
        last_date: str,
        duration: int = DEFAULT_BOOKING_DURATION,
        attrs: Optional[dict[str, Any]] = None,
    ) -> SeriesResult:
        """
        Book every occurrence of a weekly or monthly series.

        Returns:
            SeriesResult; ``created_count < total_attempted`` means some dates
            were already taken. Zero created bookings is still a valid result.

        Raises:
            ValidationError: Bad pattern, dates, start hour or duration
            NotFoundError: Court missing or deleted
        """
        validate_slot_request(first_date, start_time, duration)
        try:
            end = parse_booking_date(last_date)
        except ValueError as e:
            raise ValidationError(str(e), field="recurringEndDate") from e
        try:
            dates = occurrence_dates(parse_booking_date(first_date), end, pattern)
        except ValueError as e:
            raise ValidationError(str(e), field="recurringPattern") from e

        if not self.court_repo.get_court_by_id(self.db, court_id):
            raise NotFoundError("Court", court_id)

        result = SeriesResult(series_id=generate_series_id(), total_attempted=len(dates))
        series_attrs = dict(attrs or {})
        series_attrs.update(
            is_recurring=True,
            recurring_series_id=result.series_id,
            recurring_pattern=pattern,
            recurring_end_date=last_date,
        )

        logger.info(
            f"📅 Expanding {pattern} series {result.series_id}: court {court_id} "
            f"{start_time}:00, {len(dates)} occurrence(s) {first_date}..{last_date}"
        )

        try:
            for occurrence in dates:
                booking = self._attempt(
                    user_id, court_id, format_booking_date(occurrence), start_time, duration, series_attrs
                )
                if booking is None:
                    result.skipped_dates.append(format_booking_date(occurrence))
                else:
                    result.created.append(booking)
        except StructuralAbort as abort:
            logger.error(
                f"❌ Series {result.series_id} aborted at {abort.occurrence_date} after "
                f"{result.created_count} booking(s): {abort.cause.message}"
            )
            raise abort.cause from None

        if result.partial:
            logger.info(
                f"⚠️ Series {result.series_id} partially booked: {result.created_count}/"
                f"{result.total_attempted}, skipped {', '.join(result.skipped_dates)}"
            )
        else:
            logger.info(f"✅ Series {result.series_id} fully booked ({result.created_count})")

        return result

    def _attempt(
        self,
        user_id: int,
        court_id: int,
        booking_date: str,
        start_time: int,
        duration: int,
        attrs: dict[str, Any],
    ) -> Optional[Booking]:
        """One occurrence: the booking, None when the slot is taken"""
        try:
            return self.allocator.create_booking(
                user_id, court_id, booking_date, start_time, duration, attrs
            )
        except SlotConflictError:
            return None
        except DomainError as e:
            raise StructuralAbort(booking_date, e) from e
