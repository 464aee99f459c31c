"""Pricing router - FastAPI endpoints for pricing rules and quotes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...config import DEFAULT_BOOKING_DURATION
from ...database import get_db
from ...models import User
from .schemas import PriceQuoteResponse, PricingRuleCreate, PricingRuleResponse, PricingRuleUpdate
from .service import PricingService

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    """Dependency injection for PricingService"""
    return PricingService(db)


@router.get("/rules", response_model=list[PricingRuleResponse])
async def list_active_rules(service: PricingService = Depends(get_pricing_service)):
    """List active pricing rules"""
    return [PricingRuleResponse.from_rule(r) for r in service.list_active_rules()]


@router.get("/rules/all", response_model=list[PricingRuleResponse])
async def list_all_rules(
    _admin: User = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    """List every pricing rule including inactive ones (admin only)"""
    return [PricingRuleResponse.from_rule(r) for r in service.list_all_rules()]


@router.post("/rules", response_model=PricingRuleResponse, status_code=201)
async def create_rule(
    data: PricingRuleCreate,
    _admin: User = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    return PricingRuleResponse.from_rule(service.create_rule(data))


@router.patch("/rules/{rule_id}", response_model=PricingRuleResponse)
async def update_rule(
    rule_id: int,
    data: PricingRuleUpdate,
    _admin: User = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    return PricingRuleResponse.from_rule(service.update_rule(rule_id, data))


@router.delete("/rules/{rule_id}")
async def delete_rule(
    rule_id: int,
    _admin: User = Depends(require_admin),
    service: PricingService = Depends(get_pricing_service),
):
    return service.delete_rule(rule_id)


@router.get("/quote", response_model=PriceQuoteResponse)
async def calculate_price(
    courtId: int = Query(...),
    date: str = Query(..., description="YYYY-MM-DD"),
    startTime: int = Query(...),
    duration: int = Query(DEFAULT_BOOKING_DURATION, description="Minutes"),
    service: PricingService = Depends(get_pricing_service),
):
    """Quote the price of a slot without booking it"""
    quote = service.quote(courtId, date, startTime, duration)
    return PriceQuoteResponse(
        pricePerHour=quote.price_per_hour,
        duration=quote.duration,
        totalPrice=quote.total_price,
        appliedRuleId=quote.applied_rule_id,
    )
