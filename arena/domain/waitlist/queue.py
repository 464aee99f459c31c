"""
Waitlist priority queue for fully booked slots.

Entries are never reordered in storage. The queue order for a slot is
computed when it is read: higher priority first, then earlier created_at,
then lower id. Priority is taken from the user's membership tier when they
join and is not revisited if the membership later changes.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...clock import SystemClock
from ...config import DEFAULT_BOOKING_DURATION
from ...errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ...models import WAITLIST_NOTIFIED, WAITLIST_WAITING, WaitlistEntry
from ...shared.validators import parse_booking_date, validate_duration, validate_start_hour
from ..courts.repository import CourtRepository
from ..memberships import DEFAULT_PRIORITY, TIER_PRIORITY, MembershipRepository
from .repository import WaitlistRepository

logger = logging.getLogger(__name__)


def queue_order(entries: Iterable[WaitlistEntry]) -> list[WaitlistEntry]:
    return sorted(entries, key=lambda e: (-e.priority, e.created_at, e.id))


class WaitlistPriorityQueue:
    """Priority-ordered waitlist for a court slot"""

    def __init__(self, db: Session, clock: Optional[SystemClock] = None):
        self.db = db
        self.clock = clock or SystemClock()
        self.repo = WaitlistRepository()
        self.court_repo = CourtRepository()
        self.membership_repo = MembershipRepository()

    def priority_for_user(self, user_id: int) -> int:
        """VIP=4, Premium=3, Regular=2, anything else 1"""
        membership = self.membership_repo.get_active_membership(self.db, user_id)
        if not membership or not membership.tier:
            return DEFAULT_PRIORITY
        return TIER_PRIORITY.get(membership.tier.name, DEFAULT_PRIORITY)

    def join(
        self,
        user_id: int,
        court_id: int,
        requested_date: str,
        requested_time: int,
        duration: Optional[int] = DEFAULT_BOOKING_DURATION,
    ) -> WaitlistEntry:
        """
        Add the user to a slot's waitlist.

        Raises:
            ValidationError: Malformed date, hour or duration
            NotFoundError: Court missing or deleted
            ConflictError: The user is already waiting for this slot
        """
        try:
            parse_booking_date(requested_date)
            validate_start_hour(requested_time)
            if duration is not None:
                validate_duration(duration)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if not self.court_repo.get_court_by_id(self.db, court_id):
            raise NotFoundError("Court", court_id)

        existing = self.repo.find_waiting_for_user(
            self.db, user_id, court_id, requested_date, requested_time
        )
        if existing:
            raise ConflictError(
                "Already in waitlist for this slot",
                code="ALREADY_WAITLISTED",
                details={"waitlist_id": existing.id},
            )

        priority = self.priority_for_user(user_id)
        entry = self.repo.create_entry(
            self.db,
            user_id=user_id,
            court_id=court_id,
            requested_date=requested_date,
            requested_time=requested_time,
            duration=duration,
            priority=priority,
            status=WAITLIST_WAITING,
            created_at=self.clock.now(),
        )
        logger.info(
            f"📥 User {user_id} joined waitlist for court {court_id} {requested_date} "
            f"{requested_time}:00 with priority {priority}"
        )
        return entry

    def leave(self, user_id: int, entry_id: int) -> None:
        entry = self.repo.get_entry_by_id(self.db, entry_id)
        if not entry:
            raise NotFoundError("Waitlist entry", entry_id)
        if entry.user_id != user_id:
            raise UnauthorizedError("Unauthorized")
        self.repo.delete_entry(self.db, entry)

    def list_entries(
        self, user_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[WaitlistEntry]:
        return self.repo.list_entries(self.db, user_id=user_id, status=status)

    def ordered_waiting(
        self, court_id: int, requested_date: str, requested_time: int
    ) -> list[WaitlistEntry]:
        """The slot's waiting entries in the order they would be promoted"""
        return queue_order(
            self.repo.get_waiting_for_slot(self.db, court_id, requested_date, requested_time)
        )

    def notify_next(
        self, court_id: int, requested_date: str, requested_time: int
    ) -> Optional[WaitlistEntry]:
        """
        Promote the head of a slot's waitlist to ``notified``.

        Returns:
            The promoted entry, or None when nobody is waiting
        """
        try:
            waiting = self.repo.get_waiting_for_slot(
                self.db, court_id, requested_date, requested_time, for_update=True
            )
            if not waiting:
                self.db.rollback()
                return None

            head = queue_order(waiting)[0]
            head.status = WAITLIST_NOTIFIED
            head.notified_at = self.clock.now()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(head)
        logger.info(
            f"🔔 Waitlist entry {head.id} (user {head.user_id}, priority {head.priority}) "
            f"notified for court {court_id} {requested_date} {requested_time}:00"
        )
        return head
