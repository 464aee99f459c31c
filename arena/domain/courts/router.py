"""Court router - FastAPI endpoints for court operations"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...clock import SystemClock, get_clock
from ...database import get_db
from ...models import User
from .schemas import CourtCreate, CourtResponse, CourtStatusUpdate, CourtUpdate
from .service import CourtService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courts", tags=["Courts"])


def get_court_service(
    db: Session = Depends(get_db), clock: SystemClock = Depends(get_clock)
) -> CourtService:
    """Dependency injection for CourtService"""
    return CourtService(db, clock)


@router.get("", response_model=list[CourtResponse])
async def get_courts(service: CourtService = Depends(get_court_service)):
    """List all courts"""
    return [CourtResponse.from_court(c) for c in service.get_courts()]


@router.get("/{court_id}", response_model=CourtResponse)
async def get_court(
    court_id: int,
    _current_user: User = Depends(get_current_user),
    service: CourtService = Depends(get_court_service),
):
    """Get a specific court"""
    return CourtResponse.from_court(service.get_court(court_id))


@router.post("", response_model=CourtResponse, status_code=201)
async def create_court(
    data: CourtCreate,
    _admin: User = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    """Add a court (admin only)"""
    return CourtResponse.from_court(service.create_court(data))


@router.patch("/{court_id}", response_model=CourtResponse)
async def update_court(
    court_id: int,
    data: CourtUpdate,
    _admin: User = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    """Update a court (admin only)"""
    return CourtResponse.from_court(service.update_court(court_id, data))


@router.patch("/{court_id}/status", response_model=CourtResponse)
async def update_court_status(
    court_id: int,
    data: CourtStatusUpdate,
    _admin: User = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    """Open a court or put it under maintenance (admin only)"""
    return CourtResponse.from_court(service.update_status(court_id, data.status))


@router.delete("/{court_id}")
async def delete_court(
    court_id: int,
    _admin: User = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    """Delete a court without future bookings (admin only)"""
    return service.delete_court(court_id)
