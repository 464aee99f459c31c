"""Slot availability - is a court/date/hour already confirmed?"""

from sqlalchemy.orm import Session

from .repository import BookingRepository


class SlotAvailabilityChecker:
    """
    Read-only check against confirmed bookings.

    Only meaningful for allocation when called inside the allocator's slot
    reservation and transaction; on its own it is a point-in-time answer for
    display purposes.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    def is_slot_taken(
        self, court_id: int, booking_date: str, start_time: int, for_update: bool = False
    ) -> bool:
        booking = self.repo.find_confirmed_in_slot(
            self.db, court_id, booking_date, start_time, for_update=for_update
        )
        return booking is not None
