"""Memberships domain - Read-only membership lookups

Tier and membership administration lives outside this service; booking
features only need to know a user's active tier.
"""

from .repository import MembershipRepository

# Waitlist priority by tier name; anything else (Day Pass, no membership) is 1
TIER_PRIORITY = {"VIP": 4, "Premium": 3, "Regular": 2}
DEFAULT_PRIORITY = 1

__all__ = ["MembershipRepository", "TIER_PRIORITY", "DEFAULT_PRIORITY"]
