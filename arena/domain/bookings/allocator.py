"""
Booking allocator - the exclusivity boundary for court slots.

A slot is (court, date, start hour). Creating a booking checks that no
confirmed booking holds the slot and inserts the new one inside a single
critical section: the per-slot reservation from SlotLockRegistry plus one
database transaction. A concurrent writer in another process is stopped by
the partial unique index on confirmed bookings, whose IntegrityError is
reported as the same SlotConflictError.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...clock import SystemClock
from ...config import DEFAULT_BOOKING_DURATION
from ...errors import NotFoundError, SlotConflictError, UnauthorizedError, ValidationError
from ...models import BOOKING_CANCELLED, BOOKING_CONFIRMED, Booking, User
from ...shared.validators import parse_booking_date, validate_duration, validate_start_hour
from ..courts.repository import CourtRepository
from ..pricing.engine import PricingEngine
from .availability import SlotAvailabilityChecker
from .repository import BookingRepository
from .slot_locks import SlotLockRegistry, slot_locks

logger = logging.getLogger(__name__)

# Optional booking fields callers may set
BOOKING_ATTRIBUTES = {
    "purpose",
    "notes",
    "is_guest",
    "guest_name",
    "guest_phone",
    "is_team_booking",
    "team_size",
    "team_name",
    "is_recurring",
    "recurring_series_id",
    "recurring_pattern",
    "recurring_end_date",
}


SLOT_INDEX_NAME = "uq_bookings_confirmed_slot"


def is_slot_violation(integrity_error: IntegrityError) -> bool:
    """True when the error comes from the confirmed-slot unique index"""
    orig = getattr(integrity_error, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag is not None else None
    if constraint_name:
        return constraint_name == SLOT_INDEX_NAME

    # SQLite names the columns rather than the index
    text = str(orig)
    return SLOT_INDEX_NAME in text or (
        "UNIQUE constraint failed" in text and "bookings.court_id" in text
    )


def validate_slot_request(booking_date: str, start_time: int, duration: int) -> None:
    """Raise ValidationError for malformed date/time/duration input"""
    try:
        parse_booking_date(booking_date)
    except ValueError as e:
        raise ValidationError(str(e), field="bookingDate") from e
    try:
        validate_start_hour(start_time)
    except ValueError as e:
        raise ValidationError(str(e), field="startTime") from e
    try:
        validate_duration(duration)
    except ValueError as e:
        raise ValidationError(str(e), field="duration") from e


class BookingAllocator:
    """Creates and cancels bookings while protecting slot exclusivity"""

    def __init__(
        self,
        db: Session,
        clock: Optional[SystemClock] = None,
        locks: Optional[SlotLockRegistry] = None,
        pricing: Optional[PricingEngine] = None,
    ):
        self.db = db
        self.clock = clock or SystemClock()
        self.locks = locks or slot_locks
        self.pricing = pricing or PricingEngine(db)
        self.availability = SlotAvailabilityChecker(db)
        self.repo = BookingRepository()
        self.court_repo = CourtRepository()

    def create_booking(
        self,
        user_id: int,
        court_id: int,
        booking_date: str,
        start_time: int,
        duration: int = DEFAULT_BOOKING_DURATION,
        attrs: Optional[dict[str, Any]] = None,
    ) -> Booking:
        """
        Allocate one confirmed booking.

        Raises:
            ValidationError: Malformed date, start hour, duration or attributes
            NotFoundError: Court missing or deleted
            SlotConflictError: The slot already holds a confirmed booking
        """
        validate_slot_request(booking_date, start_time, duration)

        extra = dict(attrs or {})
        unknown = set(extra) - BOOKING_ATTRIBUTES
        if unknown:
            raise ValidationError(f"Unknown booking attributes: {', '.join(sorted(unknown))}")

        court = self.court_repo.get_court_by_id(self.db, court_id)
        if not court:
            raise NotFoundError("Court", court_id)

        quote = self.pricing.calculate_price(court_id, booking_date, start_time, duration)

        with self.locks.reserve((court_id, booking_date, start_time)):
            try:
                if self.availability.is_slot_taken(court_id, booking_date, start_time, for_update=True):
                    logger.warning(
                        f"⚠️ Slot conflict: court {court_id} {booking_date} {start_time}:00 "
                        f"already booked (user {user_id})"
                    )
                    raise SlotConflictError(court_id, booking_date, start_time)

                booking = self.repo.add_booking(
                    self.db,
                    user_id=user_id,
                    court_id=court_id,
                    booking_date=booking_date,
                    start_time=start_time,
                    end_time=start_time + duration / 60,
                    duration=duration,
                    status=BOOKING_CONFIRMED,
                    price=quote.total_price,
                    created_at=self.clock.now(),
                    **extra,
                )
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if not is_slot_violation(e):
                    raise
                logger.warning(
                    f"⚠️ Slot conflict at insert: court {court_id} {booking_date} {start_time}:00"
                )
                raise SlotConflictError(court_id, booking_date, start_time) from e
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(booking)
        logger.info(
            f"✅ Booking {booking.id} confirmed: court {court_id} {booking_date} "
            f"{start_time}:00 for {duration}min, price {booking.price}"
        )
        return booking

    def cancel_booking(self, user_id: int, booking_id: int) -> tuple[Booking, bool]:
        """
        Cancel a booking owned by ``user_id`` (admins may cancel any).

        Returns:
            (booking, changed) where ``changed`` is False when the booking was
            already cancelled

        Raises:
            NotFoundError: Booking missing
            UnauthorizedError: Actor is neither the owner nor an admin
        """
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking", booking_id)

        if booking.user_id != user_id:
            actor = self.db.query(User).filter(User.id == user_id).first()
            if not actor or not actor.is_admin:
                logger.warning(f"⚠️ User {user_id} tried to cancel booking {booking_id}")
                raise UnauthorizedError("You are not authorized to cancel this booking.")

        if booking.status == BOOKING_CANCELLED:
            logger.info(f"Booking {booking_id} already cancelled, nothing to do")
            return booking, False

        booking.status = BOOKING_CANCELLED
        booking.cancelled_at = self.clock.now()
        self.db.commit()
        self.db.refresh(booking)

        logger.info(
            f"🗑️ Booking {booking_id} cancelled: court {booking.court_id} "
            f"{booking.booking_date} {booking.start_time}:00 is free again"
        )
        return booking, True
