"""Bookings domain - Slot allocation, recurring series and cancellation"""

from .allocator import BookingAllocator
from .recurring import RecurringSeriesExpander
from .router import router

__all__ = ["router", "BookingAllocator", "RecurringSeriesExpander"]
