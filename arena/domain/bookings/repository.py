"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import BOOKING_CONFIRMED, Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def find_confirmed_in_slot(
        db: Session, court_id: int, booking_date: str, start_time: int, for_update: bool = False
    ) -> Optional[Booking]:
        """Get the confirmed booking occupying an exact slot, if any"""
        query = db.query(Booking).filter(
            Booking.court_id == court_id,
            Booking.booking_date == booking_date,
            Booking.start_time == start_time,
            Booking.status == BOOKING_CONFIRMED,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def add_booking(db: Session, **booking_data) -> Booking:
        """Stage a new booking in the current transaction (caller commits)"""
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_confirmed_for_date(db: Session, booking_date: str) -> list[Booking]:
        """Confirmed bookings on a date, for the calendar view"""
        return (
            db.query(Booking)
            .filter(Booking.booking_date == booking_date, Booking.status == BOOKING_CONFIRMED)
            .order_by(Booking.court_id.asc(), Booking.start_time.asc())
            .all()
        )

    @staticmethod
    def get_bookings_for_user(db: Session, user_id: int) -> list[Booking]:
        """A user's bookings, newest first, with court loaded"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.court))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_all_bookings(db: Session) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.court), joinedload(Booking.user))
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_series_bookings(db: Session, series_id: str) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.court))
            .filter(Booking.recurring_series_id == series_id)
            .order_by(Booking.booking_date.asc())
            .all()
        )
