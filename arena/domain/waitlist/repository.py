"""Waitlist repository - Database operations for waitlist entries"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import WAITLIST_WAITING, WaitlistEntry


class WaitlistRepository:
    """Repository for waitlist database operations"""

    @staticmethod
    def get_waiting_for_slot(
        db: Session, court_id: int, requested_date: str, requested_time: int, for_update: bool = False
    ) -> list[WaitlistEntry]:
        """Waiting entries for an exact slot, in no particular order"""
        query = db.query(WaitlistEntry).filter(
            WaitlistEntry.court_id == court_id,
            WaitlistEntry.requested_date == requested_date,
            WaitlistEntry.requested_time == requested_time,
            WaitlistEntry.status == WAITLIST_WAITING,
        )
        if for_update:
            query = query.with_for_update()
        return query.all()

    @staticmethod
    def find_waiting_for_user(
        db: Session, user_id: int, court_id: int, requested_date: str, requested_time: int
    ) -> Optional[WaitlistEntry]:
        return (
            db.query(WaitlistEntry)
            .filter(
                WaitlistEntry.user_id == user_id,
                WaitlistEntry.court_id == court_id,
                WaitlistEntry.requested_date == requested_date,
                WaitlistEntry.requested_time == requested_time,
                WaitlistEntry.status == WAITLIST_WAITING,
            )
            .first()
        )

    @staticmethod
    def get_entry_by_id(db: Session, entry_id: int) -> Optional[WaitlistEntry]:
        return db.query(WaitlistEntry).filter(WaitlistEntry.id == entry_id).first()

    @staticmethod
    def list_entries(
        db: Session, user_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[WaitlistEntry]:
        query = db.query(WaitlistEntry).options(joinedload(WaitlistEntry.court))
        if user_id is not None:
            query = query.filter(WaitlistEntry.user_id == user_id)
        if status:
            query = query.filter(WaitlistEntry.status == status)
        return query.order_by(WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc()).all()

    @staticmethod
    def create_entry(db: Session, **entry_data) -> WaitlistEntry:
        entry = WaitlistEntry(**entry_data)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def delete_entry(db: Session, entry: WaitlistEntry) -> None:
        db.delete(entry)
        db.commit()
