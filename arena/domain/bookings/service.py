"""Booking service - Orchestrates allocation, series expansion and cancellation"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...clock import SystemClock
from ...errors import NotFoundError, UnauthorizedError, ValidationError
from ...models import Booking, User, WaitlistEntry
from ...shared.validators import parse_booking_date
from ..waitlist.queue import WaitlistPriorityQueue
from .allocator import BookingAllocator
from .recurring import RecurringSeriesExpander, SeriesResult
from .repository import BookingRepository
from .schemas import BookingBase, BookingCreate, RecurringBookingCreate

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking operations"""

    def __init__(self, db: Session, clock: Optional[SystemClock] = None):
        self.db = db
        self.clock = clock or SystemClock()
        self.repo = BookingRepository()
        self.allocator = BookingAllocator(db, clock=self.clock)
        self.expander = RecurringSeriesExpander(db, allocator=self.allocator)
        self.waitlist = WaitlistPriorityQueue(db, clock=self.clock)

    def _resolve_owner(self, actor: User, data: BookingBase) -> int:
        """The user the booking is for: the actor, or anyone when an admin asks"""
        if data.userId is None or data.userId == actor.id or not actor.is_admin:
            return actor.id

        owner = self.db.query(User).filter(User.id == data.userId).first()
        if not owner:
            raise NotFoundError("User", data.userId)
        logger.info(f"Admin {actor.id} booking on behalf of user {owner.id}")
        return owner.id

    def create_booking(self, actor: User, data: BookingCreate) -> Booking:
        return self.allocator.create_booking(
            self._resolve_owner(actor, data),
            data.courtId,
            data.bookingDate,
            data.startTime,
            data.duration,
            data.booking_attributes(),
        )

    def create_recurring_bookings(self, actor: User, data: RecurringBookingCreate) -> SeriesResult:
        return self.expander.create_recurring_bookings(
            self._resolve_owner(actor, data),
            data.courtId,
            data.bookingDate,
            data.startTime,
            data.recurringPattern,
            data.recurringEndDate,
            duration=data.duration,
            attrs=data.booking_attributes(),
        )

    def cancel_booking(
        self, actor: User, booking_id: int
    ) -> tuple[Booking, bool, Optional[WaitlistEntry]]:
        """
        Cancel a booking and promote the head of the freed slot's waitlist.

        Returns:
            (booking, changed, notified_entry); nothing is promoted when the
            booking was already cancelled
        """
        booking, changed = self.allocator.cancel_booking(actor.id, booking_id)
        if not changed:
            return booking, False, None

        notified = self.waitlist.notify_next(
            booking.court_id, booking.booking_date, booking.start_time
        )
        return booking, True, notified

    def get_bookings_for_date(self, booking_date: str) -> list[Booking]:
        try:
            parse_booking_date(booking_date)
        except ValueError as e:
            raise ValidationError(str(e), field="date") from e
        return self.repo.get_confirmed_for_date(self.db, booking_date)

    def get_user_bookings(self, user_id: int) -> list[Booking]:
        return self.repo.get_bookings_for_user(self.db, user_id)

    def get_all_bookings(self) -> list[Booking]:
        return self.repo.get_all_bookings(self.db)

    def get_series(self, actor: User, series_id: str) -> list[Booking]:
        bookings = self.repo.get_series_bookings(self.db, series_id)
        if not bookings:
            raise NotFoundError("Recurring series", series_id)
        if bookings[0].user_id != actor.id and not actor.is_admin:
            raise UnauthorizedError("You are not authorized to view this series.")
        return bookings
