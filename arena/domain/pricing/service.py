"""Pricing service - Administration of pricing rules"""

import logging

from sqlalchemy.orm import Session

from ...errors import NotFoundError, ValidationError
from ...models import PricingRule
from ...shared.validators import hour_prefix
from .engine import PriceQuote, PricingEngine
from .repository import PricingRuleRepository
from .schemas import PricingRuleCreate, PricingRuleUpdate

logger = logging.getLogger(__name__)


class PricingService:
    """Service layer for pricing rules and quotes"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PricingRuleRepository()
        self.engine = PricingEngine(db)

    def list_active_rules(self) -> list[PricingRule]:
        return self.repo.get_active_rules(self.db)

    def list_all_rules(self) -> list[PricingRule]:
        return self.repo.get_all_rules(self.db)

    def get_rule(self, rule_id: int) -> PricingRule:
        rule = self.repo.get_rule_by_id(self.db, rule_id)
        if not rule:
            raise NotFoundError("Pricing rule", rule_id)
        return rule

    def create_rule(self, data: PricingRuleCreate) -> PricingRule:
        """Create a rule; new rules are active immediately"""
        rule = self.repo.create_rule(
            self.db,
            name=data.name,
            description=data.description,
            start_time=data.startTime,
            end_time=data.endTime,
            days_of_week=data.daysOfWeek,
            price_per_hour=data.pricePerHour,
            court_ids=data.courtIds or [],
            priority=data.priority,
            is_active=True,
        )
        logger.info(
            f"✅ Pricing rule {rule.id} '{rule.name}' created "
            f"({rule.start_time}-{rule.end_time}, {rule.price_per_hour}/hr, priority {rule.priority})"
        )
        return rule

    def update_rule(self, rule_id: int, data: PricingRuleUpdate) -> PricingRule:
        rule = self.get_rule(rule_id)

        start_time = data.startTime or rule.start_time
        end_time = data.endTime or rule.end_time
        if hour_prefix(start_time) >= hour_prefix(end_time):
            raise ValidationError("Rule start time must be before its end time", field="startTime")

        updates = {
            "name": data.name,
            "description": data.description,
            "start_time": data.startTime,
            "end_time": data.endTime,
            "days_of_week": data.daysOfWeek,
            "price_per_hour": data.pricePerHour,
            "court_ids": data.courtIds,
            "priority": data.priority,
            "is_active": data.isActive,
        }
        return self.repo.update_rule(self.db, rule, **updates)

    def delete_rule(self, rule_id: int) -> dict:
        rule = self.get_rule(rule_id)
        self.repo.delete_rule(self.db, rule)
        logger.info(f"🗑️ Pricing rule {rule_id} removed")
        return {"message": "Pricing rule deleted"}

    def quote(self, court_id: int, booking_date: str, start_time: int, duration: int) -> PriceQuote:
        return self.engine.calculate_price(court_id, booking_date, start_time, duration)
