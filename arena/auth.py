"""
Caller identity and role checks.

Authentication (OTP, sessions) happens upstream; the gateway forwards the
authenticated user's id in the X-User-Id header. This module resolves that
id to a User and provides the admin precondition used by court and pricing
rule mutations.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .database import get_db
from .models import User

logger = logging.getLogger(__name__)


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user from the X-User-Id header"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning(f"⚠️ Malformed X-User-Id header: {x_user_id!r}")
        raise HTTPException(status_code=401, detail="Not authenticated") from None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Unknown user id in X-User-Id header: {user_id}")
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency that only lets administrators through"""
    if not current_user.is_admin:
        logger.warning(f"⚠️ User {current_user.id} attempted an admin-only operation")
        raise HTTPException(status_code=403, detail="User is not an admin.")
    return current_user
