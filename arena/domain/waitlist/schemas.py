"""Waitlist domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...config import DEFAULT_BOOKING_DURATION
from ...shared.validators import parse_booking_date, validate_start_hour


class WaitlistJoin(BaseModel):
    """Schema for joining a slot's waitlist"""

    courtId: int
    requestedDate: str
    requestedTime: int
    duration: Optional[int] = DEFAULT_BOOKING_DURATION

    @field_validator("requestedDate")
    @classmethod
    def validate_requested_date(cls, v):
        parse_booking_date(v)
        return v


class WaitlistNotifyRequest(BaseModel):
    courtId: int
    requestedDate: str
    requestedTime: int

    @field_validator("requestedDate")
    @classmethod
    def validate_requested_date(cls, v):
        parse_booking_date(v)
        return v

    @field_validator("requestedTime")
    @classmethod
    def validate_requested_time(cls, v):
        return validate_start_hour(v)


class WaitlistEntryResponse(BaseModel):
    """Schema for waitlist entry response"""

    id: int
    userId: int
    courtId: int
    courtName: Optional[str] = None
    requestedDate: str
    requestedTime: int
    duration: Optional[int] = None
    priority: int
    status: str
    notifiedAt: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_entry(cls, entry) -> "WaitlistEntryResponse":
        return cls(
            id=entry.id,
            userId=entry.user_id,
            courtId=entry.court_id,
            courtName=entry.court.name if entry.court else None,
            requestedDate=entry.requested_date,
            requestedTime=entry.requested_time,
            duration=entry.duration,
            priority=entry.priority,
            status=entry.status,
            notifiedAt=entry.notified_at,
            created_at=entry.created_at,
        )
