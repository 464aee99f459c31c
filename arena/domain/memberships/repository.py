"""Membership repository - Read access to user memberships"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Membership


class MembershipRepository:
    """Repository for membership lookups used by booking features"""

    @staticmethod
    def get_active_membership(db: Session, user_id: int) -> Optional[Membership]:
        """Get the user's active membership with its tier loaded"""
        return (
            db.query(Membership)
            .options(joinedload(Membership.tier))
            .filter(Membership.user_id == user_id, Membership.status == "active")
            .order_by(Membership.id.desc())
            .first()
        )
