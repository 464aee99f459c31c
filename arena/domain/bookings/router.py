"""Booking router - FastAPI endpoints for booking operations

Endpoints are plain ``def`` so allocation, which may wait on a slot
reservation, runs in the threadpool instead of blocking the event loop.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...clock import SystemClock, get_clock
from ...config import BOOKING_RATE_LIMIT, BOOKING_RATE_WINDOW_SECONDS
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    BookingCreate,
    BookingResponse,
    CancelResponse,
    RecurringBookingCreate,
    SeriesResponse,
)
from .service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])

rate_limit_bookings = create_rate_limiter(
    limit=BOOKING_RATE_LIMIT,
    window_seconds=BOOKING_RATE_WINDOW_SECONDS,
    key_prefix="bookings",
)


def get_booking_service(
    db: Session = Depends(get_db), clock: SystemClock = Depends(get_clock)
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, clock)


@router.post("", response_model=BookingResponse, status_code=201)
def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    """Book a single slot; 409 when it is already taken"""
    return BookingResponse.from_booking(service.create_booking(current_user, data))


@router.post("/recurring", response_model=SeriesResponse, status_code=201)
def create_recurring_bookings(
    data: RecurringBookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_bookings),
):
    """Book a weekly or monthly series, skipping dates that are already taken"""
    result = service.create_recurring_bookings(current_user, data)
    return SeriesResponse(
        seriesId=result.series_id,
        createdCount=result.created_count,
        attemptedCount=result.total_attempted,
        partial=result.partial,
        skippedDates=result.skipped_dates,
        bookings=[BookingResponse.from_booking(b) for b in result.created],
    )


@router.post("/{booking_id}/cancel", response_model=CancelResponse)
def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking, changed, notified = service.cancel_booking(current_user, booking_id)
    return CancelResponse(
        booking=BookingResponse.from_booking(booking),
        alreadyCancelled=not changed,
        notifiedWaitlistEntryId=notified.id if notified else None,
    )


@router.get("/date/{booking_date}", response_model=list[BookingResponse])
def get_bookings_for_date(
    booking_date: str,
    _current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Confirmed bookings on a date, for the availability calendar"""
    return [BookingResponse.from_booking(b) for b in service.get_bookings_for_date(booking_date)]


@router.get("/mine", response_model=list[BookingResponse])
def get_my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [BookingResponse.from_booking(b) for b in service.get_user_bookings(current_user.id)]


@router.get("", response_model=list[BookingResponse])
def get_all_bookings(
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Every booking, newest first (admin only)"""
    return [BookingResponse.from_booking(b) for b in service.get_all_bookings()]


@router.get("/series/{series_id}", response_model=list[BookingResponse])
def get_series(
    series_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [BookingResponse.from_booking(b) for b in service.get_series(current_user, series_id)]
