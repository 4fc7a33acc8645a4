"""Line item pricer."""

from dataclasses import dataclass

from .errors import InvariantViolationError
from .items import SaleItem


@dataclass(frozen=True)
class LinePrice:
    """Prices computed for a single sale line."""

    item: SaleItem
    effective_price: float
    line_total: float
    discounted_line_total: float

    @property
    def item_discount(self) -> float:
        return self.line_total - self.discounted_line_total


def check_custom_item(item: SaleItem) -> None:
    """Raise InvariantViolationError if a custom item carries adjustments."""
    if item.is_custom and not item.is_plain():
        raise InvariantViolationError(
            f"custom item {item.id!r} carries a discount or price override"
        )


def price_line(item: SaleItem) -> LinePrice:
    """Compute the effective unit price, line total and discounted line total.

    ``line_total`` is the pre-discount total at the effective price.
    ``discounted_line_total`` applies the item discount and is never negative.
    """
    check_custom_item(item)

    effective_price = item.effective_price
    line_total = max(0.0, effective_price * item.quantity)

    if item.discount is None:
        discounted = line_total
    else:
        discounted = item.discount.apply(line_total)

    return LinePrice(
        item=item,
        effective_price=effective_price,
        line_total=line_total,
        discounted_line_total=max(0.0, discounted),
    )
