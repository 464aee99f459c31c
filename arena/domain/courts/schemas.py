"""Court domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_open_hours


class OpenHours(BaseModel):
    start: int
    end: int

    @model_validator(mode="after")
    def validate_window(self):
        validate_open_hours(self.start, self.end)
        return self


class CourtCreate(BaseModel):
    """Schema for creating a new court"""

    name: str
    description: Optional[str] = None
    surfaceType: Optional[str] = None
    capacity: Optional[int] = None
    slotDuration: Optional[int] = 60
    imageUrl: Optional[str] = None
    amenities: Optional[list[str]] = None
    openHours: Optional[OpenHours] = None
    hourlyRate: Optional[float] = None
    dailyRate: Optional[float] = None
    weeklyRate: Optional[float] = None
    monthlyRate: Optional[float] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Court name is required")
        return v.strip()


class CourtUpdate(BaseModel):
    """Schema for updating an existing court"""

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Literal["open", "maintenance"]] = None
    openHours: Optional[OpenHours] = None
    hourlyRate: Optional[float] = None
    dailyRate: Optional[float] = None
    weeklyRate: Optional[float] = None
    monthlyRate: Optional[float] = None


class CourtStatusUpdate(BaseModel):
    status: Literal["open", "maintenance"]


class CourtResponse(BaseModel):
    """Schema for court response"""

    id: int
    name: str
    status: str
    description: Optional[str] = None
    surfaceType: Optional[str] = None
    capacity: Optional[int] = None
    slotDuration: Optional[int] = None
    imageUrl: Optional[str] = None
    amenities: Optional[list[str]] = None
    openHours: Optional[OpenHours] = None
    hourlyRate: Optional[float] = None
    dailyRate: Optional[float] = None
    weeklyRate: Optional[float] = None
    monthlyRate: Optional[float] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_court(cls, court) -> "CourtResponse":
        open_hours = None
        if court.open_hour_start is not None and court.open_hour_end is not None:
            open_hours = OpenHours(start=court.open_hour_start, end=court.open_hour_end)
        return cls(
            id=court.id,
            name=court.name,
            status=court.status,
            description=court.description,
            surfaceType=court.surface_type,
            capacity=court.capacity,
            slotDuration=court.slot_duration,
            imageUrl=court.image_url,
            amenities=court.amenities,
            openHours=open_hours,
            hourlyRate=court.hourly_rate,
            dailyRate=court.daily_rate,
            weeklyRate=court.weekly_rate,
            monthlyRate=court.monthly_rate,
            created_at=court.created_at,
        )
