"""Waitlist domain - Priority queues for fully booked slots"""

from .queue import WaitlistPriorityQueue
from .router import router

__all__ = ["router", "WaitlistPriorityQueue"]
