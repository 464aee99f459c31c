"""
Pricing engine - turns the active pricing rules into a single hourly rate.

A rule applies to a booking when its days include the booking's weekday,
it is unrestricted or lists the court, and the booking's *start hour* lies
in [rule start hour, rule end hour). Only the start hour is compared: a
two-hour booking starting at 09:00 is priced entirely by the rule covering
09:00 even if a different rule covers 10:00.

Among applicable rules the highest priority wins; equal priorities fall
back to the lowest rule id so the result does not depend on row order.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...config import DEFAULT_PRICE_PER_HOUR
from ...errors import ValidationError
from ...models import PricingRule
from ...shared.validators import hour_prefix, parse_booking_date, validate_duration, validate_start_hour
from .repository import PricingRuleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    price_per_hour: float
    duration: int
    total_price: float
    applied_rule_id: Optional[int] = None


def day_of_week(booking_date: date) -> int:
    """0=Sunday .. 6=Saturday"""
    return (booking_date.weekday() + 1) % 7


def rule_applies(rule: PricingRule, court_id: int, weekday: int, start_hour: int) -> bool:
    if weekday not in (rule.days_of_week or []):
        return False

    # Empty or missing court list means the rule covers every court
    if rule.court_ids and court_id not in rule.court_ids:
        return False

    return hour_prefix(rule.start_time) <= start_hour < hour_prefix(rule.end_time)


def select_rule(
    rules: Iterable[PricingRule], court_id: int, weekday: int, start_hour: int
) -> Optional[PricingRule]:
    """Pick the winning rule for a slot, or None when nothing applies"""
    applicable = [r for r in rules if rule_applies(r, court_id, weekday, start_hour)]
    if not applicable:
        return None
    applicable.sort(key=lambda r: (-r.priority, r.id))
    return applicable[0]


def quote_from_rules(
    rules: Iterable[PricingRule],
    court_id: int,
    booking_date: date,
    start_time: int,
    duration: int,
    default_rate: float = DEFAULT_PRICE_PER_HOUR,
) -> PriceQuote:
    rule = select_rule(rules, court_id, day_of_week(booking_date), start_time)
    price_per_hour = rule.price_per_hour if rule else default_rate
    return PriceQuote(
        price_per_hour=price_per_hour,
        duration=duration,
        total_price=price_per_hour * (duration / 60),
        applied_rule_id=rule.id if rule else None,
    )


class PricingEngine:
    """Read-only pricing over the rules stored in the database"""

    def __init__(self, db: Session, default_rate: float = DEFAULT_PRICE_PER_HOUR):
        self.db = db
        self.repo = PricingRuleRepository()
        self.default_rate = default_rate

    def calculate_price(
        self, court_id: int, booking_date: str, start_time: int, duration: int
    ) -> PriceQuote:
        """
        Price a booking.

        Args:
            court_id: Court being booked
            booking_date: YYYY-MM-DD
            start_time: Start hour (0-23)
            duration: Length in minutes

        Returns:
            PriceQuote with the hourly rate, total and the rule that set it
            (None when the default rate was used)
        """
        try:
            parsed_date = parse_booking_date(booking_date)
            validate_start_hour(start_time)
            validate_duration(duration)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        rules = self.repo.get_active_rules(self.db)
        quote = quote_from_rules(
            rules, court_id, parsed_date, start_time, duration, default_rate=self.default_rate
        )

        if quote.applied_rule_id is None:
            logger.debug(
                f"No pricing rule for court {court_id} {booking_date} {start_time}:00, "
                f"using default {self.default_rate}/hr"
            )
        return quote
