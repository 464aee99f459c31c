"""Court repository - Database operations for courts"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import BOOKING_CONFIRMED, Booking, Court


class CourtRepository:
    """Repository for court database operations"""

    @staticmethod
    def get_courts(db: Session) -> list[Court]:
        """Get all courts that have not been deleted"""
        return db.query(Court).filter(Court.deleted_at.is_(None)).order_by(Court.id.asc()).all()

    @staticmethod
    def get_court_by_id(db: Session, court_id: int) -> Optional[Court]:
        """Get a bookable court; deleted courts are treated as missing"""
        return (
            db.query(Court)
            .filter(Court.id == court_id, Court.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def create_court(db: Session, **court_data) -> Court:
        """Create a new court"""
        court = Court(**court_data)
        db.add(court)
        db.commit()
        db.refresh(court)
        return court

    @staticmethod
    def update_court(db: Session, court: Court, **updates) -> Court:
        """Update a court with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(court, key):
                setattr(court, key, value)

        db.commit()
        db.refresh(court)
        return court

    @staticmethod
    def count_future_bookings(db: Session, court_id: int, from_date: str) -> int:
        """Count confirmed bookings on or after ``from_date`` (YYYY-MM-DD)"""
        return (
            db.query(Booking)
            .filter(
                Booking.court_id == court_id,
                Booking.booking_date >= from_date,
                Booking.status == BOOKING_CONFIRMED,
            )
            .count()
        )

    @staticmethod
    def soft_delete_court(db: Session, court: Court, deleted_at: datetime) -> None:
        """Hide a court from booking operations while keeping its history"""
        court.deleted_at = deleted_at
        db.commit()
