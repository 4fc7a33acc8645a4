"""Cart aggregator.

Combines line totals, item discounts, promotion credits and the sale's
single adjustment into the totals shown at checkout. Values keep full float
precision; rounding is left to presentation (see :mod:`pos_pricing.formatting`).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from .adjustment import (
    active_promotion,
    loyalty_redemption,
    manual_discount,
    resolve_adjustment,
)
from .cart import Cart
from .discount import Discount
from .items import SaleItem
from .pricer import LinePrice, price_line
from .promotions import evaluate_priced_lines

logger = structlog.get_logger()


@dataclass(frozen=True)
class Totals:
    """Computed checkout figures for a cart snapshot."""

    subtotal: float
    total_discount: float
    final_total: float
    itemized_promo_discounts: dict[str, float] = field(default_factory=dict)
    item_discount_total: float = 0.0
    promo_discount_total: float = 0.0
    global_discount_amount: float = 0.0
    loyalty_discount_amount: float = 0.0
    lines: tuple[LinePrice, ...] = ()

    def promo_credit_for(self, item_id: str) -> float:
        return self.itemized_promo_discounts.get(item_id, 0.0)


def compute_totals(cart: Cart) -> Totals:
    """Compute subtotal, discounts and final total for a cart.

    Only the adjustment the cart carries contributes beyond item discounts:
    promotion credits, a manual discount over what remains after item
    discounts and credits, or a loyalty redemption capped at that remainder.
    """
    lines = tuple(price_line(item) for item in cart.items)

    subtotal = sum(line.line_total for line in lines)
    item_discount_total = sum(line.item_discount for line in lines)
    after_item_discounts = sum(line.discounted_line_total for line in lines)

    credits = {}
    promotion_id = active_promotion(cart.adjustment)
    if promotion_id is not None:
        credits = evaluate_priced_lines(lines, promotion_id)
    promo_discount_total = sum(credits.values())

    remaining = max(0.0, after_item_discounts - promo_discount_total)

    global_discount_amount = 0.0
    discount = manual_discount(cart.adjustment)
    if discount is not None:
        global_discount_amount = discount.reduction(remaining)

    loyalty_discount_amount = 0.0
    redemption = loyalty_redemption(cart.adjustment)
    if redemption is not None:
        loyalty_discount_amount = min(max(0.0, redemption.amount), remaining)

    total_discount = (
        item_discount_total
        + promo_discount_total
        + global_discount_amount
        + loyalty_discount_amount
    )
    final_total = max(0.0, subtotal - total_discount)

    logger.debug(
        "totals_computed",
        lines=len(lines),
        subtotal=subtotal,
        total_discount=total_discount,
        final_total=final_total,
    )

    return Totals(
        subtotal=subtotal,
        total_discount=total_discount,
        final_total=final_total,
        itemized_promo_discounts=credits,
        item_discount_total=item_discount_total,
        promo_discount_total=promo_discount_total,
        global_discount_amount=global_discount_amount,
        loyalty_discount_amount=loyalty_discount_amount,
        lines=lines,
    )


def totals_for(
    items: Iterable[SaleItem],
    *,
    global_discount: Optional[Discount] = None,
    promotion_id: Any = None,
    loyalty_amount: Any = None,
) -> Totals:
    """Compute totals from separately stored discount fields.

    Conflicting fields are resolved with the promotion taking precedence,
    see :func:`pos_pricing.adjustment.resolve_adjustment`.
    """
    adjustment = resolve_adjustment(
        global_discount=global_discount,
        promotion_id=promotion_id,
        loyalty_amount=loyalty_amount,
    )
    return compute_totals(Cart.of(items, adjustment))
