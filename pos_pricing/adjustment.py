"""The sale's single active adjustment.

A sale carries at most one of a manual global discount, a promotion or a
loyalty redemption. Holding them in one tagged field makes the conflicting
combinations unrepresentable; :func:`resolve_adjustment` converts the three
separately stored fields some callers keep into that single value.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

import structlog

from .catalog import PromotionId, parse_promotion_id
from .discount import Discount, normalize_discount

logger = structlog.get_logger()


@dataclass(frozen=True)
class ManualDiscount:
    """A percentage or fixed discount over the whole sale."""

    discount: Discount


@dataclass(frozen=True)
class PromotionAdjustment:
    """An active catalog promotion."""

    promotion_id: PromotionId


@dataclass(frozen=True)
class LoyaltyRedemption:
    """Loyalty points converted into a fixed discount."""

    points: int
    amount: float


Adjustment = Union[ManualDiscount, PromotionAdjustment, LoyaltyRedemption]


def _positive_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def resolve_adjustment(
    global_discount: Optional[Discount] = None,
    promotion_id: Any = None,
    loyalty_amount: Any = None,
    loyalty_points: int = 0,
) -> Optional[Adjustment]:
    """Collapse separately stored discount fields into one adjustment.

    Precedence is promotion, then manual discount, then loyalty redemption.
    Unknown promotion ids and unusable amounts are treated as absent.
    """
    promotion = parse_promotion_id(promotion_id)
    discount = normalize_discount(global_discount)
    amount = _positive_amount(loyalty_amount)

    candidates: list[Adjustment] = []
    if promotion is not None:
        candidates.append(PromotionAdjustment(promotion))
    if discount is not None:
        candidates.append(ManualDiscount(discount))
    if amount is not None:
        candidates.append(LoyaltyRedemption(points=max(0, int(loyalty_points or 0)), amount=amount))

    if not candidates:
        return None
    if len(candidates) > 1:
        logger.warning(
            "conflicting_adjustments",
            kept=type(candidates[0]).__name__,
            dropped=[type(c).__name__ for c in candidates[1:]],
        )
    return candidates[0]


def active_promotion(adjustment: Optional[Adjustment]) -> Optional[PromotionId]:
    if isinstance(adjustment, PromotionAdjustment):
        return adjustment.promotion_id
    return None


def manual_discount(adjustment: Optional[Adjustment]) -> Optional[Discount]:
    if isinstance(adjustment, ManualDiscount):
        return adjustment.discount
    return None


def loyalty_redemption(adjustment: Optional[Adjustment]) -> Optional[LoyaltyRedemption]:
    if isinstance(adjustment, LoyaltyRedemption):
        return adjustment
    return None
