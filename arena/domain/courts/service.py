"""Court service - Business logic for court operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...clock import SystemClock
from ...errors import ConflictError, NotFoundError
from ...models import Court
from ...shared.validators import format_booking_date
from .repository import CourtRepository
from .schemas import CourtCreate, CourtUpdate

logger = logging.getLogger(__name__)


class CourtService:
    """Service layer for court business logic"""

    def __init__(self, db: Session, clock: Optional[SystemClock] = None):
        self.db = db
        self.repo = CourtRepository()
        self.clock = clock or SystemClock()

    def get_courts(self) -> list[Court]:
        return self.repo.get_courts(self.db)

    def get_court(self, court_id: int) -> Court:
        """Get a specific court"""
        court = self.repo.get_court_by_id(self.db, court_id)
        if not court:
            raise NotFoundError("Court", court_id)
        return court

    def create_court(self, data: CourtCreate) -> Court:
        """Create a new court, open for booking"""
        court_data = {
            "name": data.name,
            "description": data.description,
            "surface_type": data.surfaceType,
            "capacity": data.capacity,
            "slot_duration": data.slotDuration,
            "image_url": data.imageUrl,
            "amenities": data.amenities or [],
            "open_hour_start": data.openHours.start if data.openHours else None,
            "open_hour_end": data.openHours.end if data.openHours else None,
            "hourly_rate": data.hourlyRate,
            "daily_rate": data.dailyRate,
            "weekly_rate": data.weeklyRate,
            "monthly_rate": data.monthlyRate,
            "status": "open",
        }
        court = self.repo.create_court(self.db, **court_data)
        logger.info(f"✅ Court {court.id} ({court.name}) created")
        return court

    def update_court(self, court_id: int, data: CourtUpdate) -> Court:
        """Update a court"""
        court = self.get_court(court_id)

        updates = {
            "name": data.name,
            "description": data.description,
            "status": data.status,
            "hourly_rate": data.hourlyRate,
            "daily_rate": data.dailyRate,
            "weekly_rate": data.weeklyRate,
            "monthly_rate": data.monthlyRate,
        }
        if data.openHours is not None:
            updates["open_hour_start"] = data.openHours.start
            updates["open_hour_end"] = data.openHours.end

        return self.repo.update_court(self.db, court, **updates)

    def update_status(self, court_id: int, status: str) -> Court:
        court = self.get_court(court_id)
        logger.info(f"🔧 Court {court_id} status {court.status} -> {status}")
        return self.repo.update_court(self.db, court, status=status)

    def delete_court(self, court_id: int) -> dict:
        """Delete a court that has no upcoming confirmed bookings"""
        court = self.get_court(court_id)

        today = format_booking_date(self.clock.today())
        future_bookings = self.repo.count_future_bookings(self.db, court_id, today)
        if future_bookings > 0:
            logger.warning(
                f"⚠️ Refusing to delete court {court_id}: {future_bookings} future booking(s)"
            )
            raise ConflictError(
                "Cannot delete court with future bookings. Please cancel all bookings first.",
                code="COURT_HAS_FUTURE_BOOKINGS",
                details={"court_id": court_id, "future_bookings": future_bookings},
            )

        self.repo.soft_delete_court(self.db, court, self.clock.now())
        logger.info(f"🗑️ Court {court_id} deleted")
        return {"message": "Court deleted"}
