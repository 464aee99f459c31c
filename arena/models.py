from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"

WAITLIST_WAITING = "waiting"
WAITLIST_NOTIFIED = "notified"
WAITLIST_FULFILLED = "fulfilled"
WAITLIST_EXPIRED = "expired"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False, index=True)  # admin, user, trainer
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="user")
    memberships = relationship("Membership", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Court(Base):
    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    status = Column(String(20), default="open", nullable=False)  # open, maintenance
    description = Column(Text, nullable=True)
    surface_type = Column(String(50), nullable=True)  # wooden, synthetic, concrete
    capacity = Column(Integer, nullable=True)  # max players
    slot_duration = Column(Integer, default=60, nullable=True)  # minutes
    image_url = Column(String(500), nullable=True)
    amenities = Column(JSON, default=list, nullable=True)  # ["AC", "Lighting", "Parking"]
    # Operating hours as hour-of-day integers, e.g. 6 and 22
    open_hour_start = Column(Integer, nullable=True)
    open_hour_end = Column(Integer, nullable=True)
    # Informational rates shown on the court card; bookings are priced by PricingRule
    hourly_rate = Column(Float, nullable=True)
    daily_rate = Column(Float, nullable=True)
    weekly_rate = Column(Float, nullable=True)
    monthly_rate = Column(Float, nullable=True)
    # Soft delete marker; a deleted court is invisible to booking operations
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="court")


class PricingRule(Base):
    __tablename__ = "pricing_rules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(String(5), nullable=False)  # "06:00"
    end_time = Column(String(5), nullable=False)  # "10:00"
    days_of_week = Column(JSON, nullable=False)  # [0..6], 0=Sunday
    price_per_hour = Column(Float, nullable=False)
    court_ids = Column(JSON, nullable=True)  # Specific courts, or all courts when empty
    priority = Column(Integer, default=0, nullable=False)  # Higher priority overrides lower
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_court_date", "court_id", "booking_date"),
        # At most one confirmed booking per slot
        Index(
            "uq_bookings_confirmed_slot",
            "court_id",
            "booking_date",
            "start_time",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=False)
    booking_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    start_time = Column(Integer, nullable=False)  # Hour of the day (0-23)
    end_time = Column(Float, nullable=False)  # start_time + duration/60, may be fractional
    duration = Column(Integer, default=60, nullable=False)  # minutes
    status = Column(String(20), default=BOOKING_CONFIRMED, nullable=False)  # confirmed, cancelled
    price = Column(Float, nullable=True)

    purpose = Column(String(50), nullable=True)  # practice, match, training, tournament
    notes = Column(Text, nullable=True)

    # Team booking
    is_team_booking = Column(Boolean, default=False, nullable=True)
    team_size = Column(Integer, nullable=True)
    team_name = Column(String(255), nullable=True)

    # Guest booking made on behalf of a walk-in player
    is_guest = Column(Boolean, default=False, nullable=True)
    guest_name = Column(String(255), nullable=True)
    guest_phone = Column(String(50), nullable=True)

    # Recurring series linkage
    is_recurring = Column(Boolean, default=False, nullable=True)
    recurring_series_id = Column(String(64), nullable=True, index=True)
    recurring_pattern = Column(String(20), nullable=True)  # weekly, monthly
    recurring_end_date = Column(String(10), nullable=True)  # YYYY-MM-DD

    created_at = Column(DateTime, nullable=False)
    cancelled_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="bookings")
    court = relationship("Court", back_populates="bookings")


class MembershipTier(Base):
    __tablename__ = "membership_tiers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)  # Day Pass, Regular, Premium, VIP
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    duration_days = Column(Integer, nullable=False, default=30)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)


class Membership(Base):
    __tablename__ = "memberships"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tier_id = Column(Integer, ForeignKey("membership_tiers.id"), nullable=False)
    status = Column(String(20), default="active", nullable=False, index=True)  # active, expired, cancelled
    start_date = Column(DateTime, nullable=True)
    expiry_date = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="memberships")
    tier = relationship("MembershipTier")


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"
    __table_args__ = (Index("ix_waitlist_court_date", "court_id", "requested_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=False)
    requested_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    requested_time = Column(Integer, nullable=False)  # Hour of the day
    duration = Column(Integer, nullable=True)  # minutes
    # Fixed at join time from the membership tier (VIP=4 ... none=1)
    priority = Column(Integer, nullable=False, default=1)
    # waiting -> notified -> fulfilled | expired
    status = Column(String(20), default=WAITLIST_WAITING, nullable=False, index=True)
    notified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)

    court = relationship("Court")
    user = relationship("User")
