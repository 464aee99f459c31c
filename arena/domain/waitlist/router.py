"""Waitlist router - FastAPI endpoints for slot waitlists"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...clock import SystemClock, get_clock
from ...database import get_db
from ...models import User
from .queue import WaitlistPriorityQueue
from .schemas import WaitlistEntryResponse, WaitlistJoin, WaitlistNotifyRequest

router = APIRouter(prefix="/waitlist", tags=["Waitlist"])


def get_waitlist_queue(
    db: Session = Depends(get_db), clock: SystemClock = Depends(get_clock)
) -> WaitlistPriorityQueue:
    """Dependency injection for WaitlistPriorityQueue"""
    return WaitlistPriorityQueue(db, clock)


@router.post("", response_model=WaitlistEntryResponse, status_code=201)
def join_waitlist(
    data: WaitlistJoin,
    current_user: User = Depends(get_current_user),
    queue: WaitlistPriorityQueue = Depends(get_waitlist_queue),
):
    """Join the waitlist for a fully booked slot"""
    entry = queue.join(
        current_user.id, data.courtId, data.requestedDate, data.requestedTime, data.duration
    )
    return WaitlistEntryResponse.from_entry(entry)


@router.get("", response_model=list[WaitlistEntryResponse])
def list_waitlist(
    status: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    queue: WaitlistPriorityQueue = Depends(get_waitlist_queue),
):
    """The caller's waitlist entries; admins see everyone's"""
    user_id = None if current_user.is_admin else current_user.id
    return [WaitlistEntryResponse.from_entry(e) for e in queue.list_entries(user_id, status)]


@router.delete("/{entry_id}")
def leave_waitlist(
    entry_id: int,
    current_user: User = Depends(get_current_user),
    queue: WaitlistPriorityQueue = Depends(get_waitlist_queue),
):
    queue.leave(current_user.id, entry_id)
    return {"message": "Removed from waitlist"}


@router.post("/notify-next", response_model=Optional[WaitlistEntryResponse])
def notify_next(
    data: WaitlistNotifyRequest,
    _admin: User = Depends(require_admin),
    queue: WaitlistPriorityQueue = Depends(get_waitlist_queue),
):
    """Promote the head of a slot's waitlist (admin only)"""
    entry = queue.notify_next(data.courtId, data.requestedDate, data.requestedTime)
    return WaitlistEntryResponse.from_entry(entry) if entry else None
