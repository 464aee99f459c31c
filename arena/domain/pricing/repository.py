"""Pricing repository - Database operations for pricing rules"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import PricingRule


class PricingRuleRepository:
    """Repository for pricing rule database operations"""

    @staticmethod
    def get_active_rules(db: Session) -> list[PricingRule]:
        """Get all rules with is_active set, in id order"""
        return (
            db.query(PricingRule)
            .filter(PricingRule.is_active.is_(True))
            .order_by(PricingRule.id.asc())
            .all()
        )

    @staticmethod
    def get_all_rules(db: Session) -> list[PricingRule]:
        return db.query(PricingRule).order_by(PricingRule.id.asc()).all()

    @staticmethod
    def get_rule_by_id(db: Session, rule_id: int) -> Optional[PricingRule]:
        return db.query(PricingRule).filter(PricingRule.id == rule_id).first()

    @staticmethod
    def create_rule(db: Session, **rule_data) -> PricingRule:
        """Create a new pricing rule"""
        rule = PricingRule(**rule_data)
        db.add(rule)
        db.commit()
        db.refresh(rule)
        return rule

    @staticmethod
    def update_rule(db: Session, rule: PricingRule, **updates) -> PricingRule:
        """Update a rule with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(rule, key):
                setattr(rule, key, value)

        db.commit()
        db.refresh(rule)
        return rule

    @staticmethod
    def delete_rule(db: Session, rule: PricingRule) -> None:
        db.delete(rule)
        db.commit()
