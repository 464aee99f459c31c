"""Pricing domain - Time-windowed pricing rules and the pricing engine"""

from .router import router

__all__ = ["router"]
