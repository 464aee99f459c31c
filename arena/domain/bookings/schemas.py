"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...config import DEFAULT_BOOKING_DURATION
from ...shared.validators import parse_booking_date, validate_phone


class BookingBase(BaseModel):
    """Fields shared by single and recurring booking requests"""

    courtId: int
    bookingDate: str
    startTime: int
    duration: int = DEFAULT_BOOKING_DURATION
    # Admins may book on behalf of another user; ignored for everyone else
    userId: Optional[int] = None
    purpose: Optional[str] = None
    notes: Optional[str] = None
    isGuest: Optional[bool] = False
    guestName: Optional[str] = None
    guestPhone: Optional[str] = None
    isTeamBooking: Optional[bool] = False
    teamSize: Optional[int] = None
    teamName: Optional[str] = None

    @field_validator("bookingDate")
    @classmethod
    def validate_booking_date(cls, v):
        parse_booking_date(v)
        return v

    @field_validator("guestPhone")
    @classmethod
    def validate_guest_phone(cls, v):
        return validate_phone(v)

    @model_validator(mode="after")
    def validate_guest(self):
        if self.isGuest and not (self.guestName or "").strip():
            raise ValueError("Guest bookings need a guest name")
        return self

    def booking_attributes(self) -> dict[str, Any]:
        """Optional columns to store on the booking"""
        attrs = {
            "purpose": self.purpose,
            "notes": self.notes,
            "is_guest": bool(self.isGuest),
            "guest_name": self.guestName,
            "guest_phone": self.guestPhone,
            "is_team_booking": bool(self.isTeamBooking),
            "team_size": self.teamSize,
            "team_name": self.teamName,
        }
        return {k: v for k, v in attrs.items() if v is not None}


class BookingCreate(BookingBase):
    """Schema for a single booking"""


class RecurringBookingCreate(BookingBase):
    """Schema for a weekly or monthly series; bookingDate is the first occurrence"""

    recurringPattern: Literal["weekly", "monthly"]
    recurringEndDate: str

    @field_validator("recurringEndDate")
    @classmethod
    def validate_end_date(cls, v):
        parse_booking_date(v)
        return v

    @model_validator(mode="after")
    def validate_range(self):
        if parse_booking_date(self.recurringEndDate) < parse_booking_date(self.bookingDate):
            raise ValueError("recurringEndDate must not be before bookingDate")
        return self


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    userId: int
    courtId: int
    courtName: Optional[str] = None
    bookingDate: str
    startTime: int
    endTime: float
    duration: int
    status: str
    price: Optional[float] = None
    purpose: Optional[str] = None
    notes: Optional[str] = None
    isGuest: Optional[bool] = None
    guestName: Optional[str] = None
    isTeamBooking: Optional[bool] = None
    teamSize: Optional[int] = None
    teamName: Optional[str] = None
    isRecurring: Optional[bool] = None
    recurringSeriesId: Optional[str] = None
    recurringPattern: Optional[str] = None
    recurringEndDate: Optional[str] = None
    created_at: datetime
    cancelledAt: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            userId=booking.user_id,
            courtId=booking.court_id,
            courtName=booking.court.name if booking.court else None,
            bookingDate=booking.booking_date,
            startTime=booking.start_time,
            endTime=booking.end_time,
            duration=booking.duration,
            status=booking.status,
            price=booking.price,
            purpose=booking.purpose,
            notes=booking.notes,
            isGuest=booking.is_guest,
            guestName=booking.guest_name,
            isTeamBooking=booking.is_team_booking,
            teamSize=booking.team_size,
            teamName=booking.team_name,
            isRecurring=booking.is_recurring,
            recurringSeriesId=booking.recurring_series_id,
            recurringPattern=booking.recurring_pattern,
            recurringEndDate=booking.recurring_end_date,
            created_at=booking.created_at,
            cancelledAt=booking.cancelled_at,
        )


class SeriesResponse(BaseModel):
    """Outcome of a recurring request; partial when some dates were taken"""

    seriesId: str
    createdCount: int
    attemptedCount: int
    partial: bool
    skippedDates: list[str]
    bookings: list[BookingResponse]


class CancelResponse(BaseModel):
    booking: BookingResponse
    alreadyCancelled: bool
    # Waitlist entry promoted because this cancellation freed its slot
    notifiedWaitlistEntryId: Optional[int] = None
