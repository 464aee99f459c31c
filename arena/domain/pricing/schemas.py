"""Pricing domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import (
    hour_prefix,
    validate_days_of_week,
    validate_hour_minute,
    validate_price_per_hour,
)


class PricingRuleCreate(BaseModel):
    """Schema for creating a pricing rule"""

    name: str
    description: Optional[str] = None
    startTime: str
    endTime: str
    daysOfWeek: list[int]
    pricePerHour: float
    courtIds: Optional[list[int]] = None
    priority: int = 0

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hour_minute(v)

    @field_validator("daysOfWeek")
    @classmethod
    def validate_days(cls, v):
        return validate_days_of_week(v)

    @field_validator("pricePerHour")
    @classmethod
    def validate_price(cls, v):
        return validate_price_per_hour(v)

    @model_validator(mode="after")
    def validate_window(self):
        if hour_prefix(self.startTime) >= hour_prefix(self.endTime):
            raise ValueError("Rule start time must be before its end time")
        return self


class PricingRuleUpdate(BaseModel):
    """Schema for updating a pricing rule; omitted fields are left unchanged"""

    name: Optional[str] = None
    description: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    daysOfWeek: Optional[list[int]] = None
    pricePerHour: Optional[float] = None
    courtIds: Optional[list[int]] = None
    priority: Optional[int] = None
    isActive: Optional[bool] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hour_minute(v)

    @field_validator("pricePerHour")
    @classmethod
    def validate_price(cls, v):
        return validate_price_per_hour(v)

    @field_validator("daysOfWeek")
    @classmethod
    def validate_days(cls, v):
        return validate_days_of_week(v)


class PricingRuleResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    startTime: str
    endTime: str
    daysOfWeek: list[int]
    pricePerHour: float
    courtIds: Optional[list[int]] = None
    priority: int
    isActive: bool

    @classmethod
    def from_rule(cls, rule) -> "PricingRuleResponse":
        return cls(
            id=rule.id,
            name=rule.name,
            description=rule.description,
            startTime=rule.start_time,
            endTime=rule.end_time,
            daysOfWeek=rule.days_of_week,
            pricePerHour=rule.price_per_hour,
            courtIds=rule.court_ids,
            priority=rule.priority,
            isActive=rule.is_active,
        )


class PriceQuoteResponse(BaseModel):
    pricePerHour: float
    duration: int
    totalPrice: float
    appliedRuleId: Optional[int] = None
