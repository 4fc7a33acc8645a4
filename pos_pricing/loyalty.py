"""Loyalty redemption rule."""

import math
from typing import Optional

from .adjustment import LoyaltyRedemption
from .config import DEFAULT_LOYALTY, LoyaltySettings
from .items import Customer


def is_eligible(points: Optional[int], settings: LoyaltySettings = DEFAULT_LOYALTY) -> bool:
    """True when a points balance reaches the redemption threshold."""
    return (points or 0) >= settings.points_for_redemption


def redemption_for(
    customer: Optional[Customer], settings: LoyaltySettings = DEFAULT_LOYALTY
) -> Optional[LoyaltyRedemption]:
    """Return the redemption a customer may apply, or None if not eligible."""
    if customer is None or not is_eligible(customer.loyalty_points, settings):
        return None
    return LoyaltyRedemption(
        points=settings.points_for_redemption,
        amount=settings.redemption_value,
    )


def points_earned(total: float, settings: LoyaltySettings = DEFAULT_LOYALTY) -> int:
    """Points accrued for a completed sale of ``total``."""
    if total <= 0:
        return 0
    return math.floor(total * settings.points_per_dollar)


def remaining_points(balance: Optional[int], redeemed: int) -> int:
    """Balance left after redeeming points; never below zero."""
    return max(0, (balance or 0) - redeemed)
