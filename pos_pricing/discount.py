"""Discount value type.

A discount is either a percentage of a price or a fixed amount. The same
value type is attached to a single line item or to the whole sale.

Construction goes through :func:`make_discount`, which normalises raw entry
values: anything that is not a positive finite number collapses to ``None``
(no discount) and percentages are clamped to 100.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

import structlog

logger = structlog.get_logger()

MAX_PERCENTAGE = 100.0


class DiscountKind(str, Enum):
    """How a discount amount is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class Discount:
    """An immutable percentage or fixed-amount reduction."""

    kind: DiscountKind
    amount: float

    def reduction(self, base: float) -> float:
        """Return the amount this discount takes off ``base``.

        The result is never negative and never larger than ``base``, even
        for instances built directly with out-of-range amounts.
        """
        if base <= 0:
            return 0.0
        amount = max(0.0, self.amount)
        if self.kind is DiscountKind.PERCENTAGE:
            return base * min(amount, MAX_PERCENTAGE) / 100
        return min(amount, base)

    def apply(self, base: float) -> float:
        """Return ``base`` after this discount."""
        return base - self.reduction(base)


def _parse_kind(kind: Union[DiscountKind, str, None]) -> Optional[DiscountKind]:
    if isinstance(kind, DiscountKind):
        return kind
    try:
        return DiscountKind(kind)
    except ValueError:
        return None


def make_discount(kind: Union[DiscountKind, str, None], amount: Any) -> Optional[Discount]:
    """Build a discount from raw entry values.

    Returns ``None`` for an unknown kind or an amount that is non-numeric,
    not finite, zero or negative. Percentages above 100 are clamped.
    """
    parsed_kind = _parse_kind(kind)
    if parsed_kind is None:
        logger.info("discount_dropped", reason="unknown_kind", kind=kind)
        return None

    if isinstance(amount, bool):
        logger.info("discount_dropped", reason="non_numeric", amount=amount)
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        logger.info("discount_dropped", reason="non_numeric", amount=amount)
        return None

    if not math.isfinite(value) or value <= 0:
        logger.info("discount_dropped", reason="not_positive", amount=value)
        return None

    if parsed_kind is DiscountKind.PERCENTAGE and value > MAX_PERCENTAGE:
        logger.debug("discount_clamped", amount=value, clamped_to=MAX_PERCENTAGE)
        value = MAX_PERCENTAGE

    return Discount(kind=parsed_kind, amount=value)


def percentage(amount: Any) -> Optional[Discount]:
    """Shorthand for a percentage discount."""
    return make_discount(DiscountKind.PERCENTAGE, amount)


def fixed(amount: Any) -> Optional[Discount]:
    """Shorthand for a fixed-amount discount."""
    return make_discount(DiscountKind.FIXED, amount)


def normalize_discount(discount: Optional[Discount]) -> Optional[Discount]:
    """Re-apply entry normalisation to an already-built discount.

    Covers instances constructed directly rather than via :func:`make_discount`.
    """
    if discount is None:
        return None
    return make_discount(discount.kind, discount.amount)
