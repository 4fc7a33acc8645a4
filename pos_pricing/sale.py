"""Sale session.

The mutable cart owned by a single checkout actor. Every mutation replaces
the affected immutable :class:`SaleItem`; totals are always recomputed from
an immutable :class:`Cart` snapshot by the pure aggregator.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from .adjustment import (
    Adjustment,
    LoyaltyRedemption,
    ManualDiscount,
    PromotionAdjustment,
    active_promotion,
)
from .aggregator import Totals, compute_totals
from .cart import Cart
from .catalog import parse_promotion_id
from .config import DEFAULT_LOYALTY, LoyaltySettings
from .discount import Discount, normalize_discount
from .errors import CommandRejectedError, errmsg
from .items import Customer, Product, SaleItem
from .loyalty import redemption_for
from .validation import require_non_negative, require_not_empty, require_positive

logger = structlog.get_logger()


def new_line_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class ParkedSale:
    """A sale set aside to be resumed later."""

    id: str
    created_at: datetime
    items: tuple[SaleItem, ...]
    customer: Optional[Customer]
    adjustment: Optional[Adjustment]


class Sale:
    """The in-progress sale at a checkout."""

    def __init__(self) -> None:
        self._items: list[SaleItem] = []
        self.customer: Optional[Customer] = None
        self.adjustment: Optional[Adjustment] = None

    @property
    def items(self) -> tuple[SaleItem, ...]:
        return tuple(self._items)

    def snapshot(self) -> Cart:
        return Cart.of(self._items, self.adjustment)

    def totals(self) -> Totals:
        return compute_totals(self.snapshot())

    def get_item(self, item_id: str) -> SaleItem:
        return self._items[self._index_of(item_id)]

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise CommandRejectedError(errmsg.ITEM_NOT_IN_SALE)

    def _replace_item(self, item_id: str, **changes: Any) -> SaleItem:
        index = self._index_of(item_id)
        updated = replace(self._items[index], **changes)
        self._items[index] = updated
        return updated

    def _require_not_custom(self, item_id: str) -> SaleItem:
        item = self.get_item(item_id)
        if item.is_custom:
            raise CommandRejectedError(errmsg.CUSTOM_ITEM_LOCKED)
        return item

    # --- Items ---

    def add_product(self, product: Product) -> SaleItem:
        """Add one unit of a product.

        Merges into an existing line of the same product unless that line
        carries a discount or price override.
        """
        for item in self._items:
            if item.product_id == product.id and item.is_plain():
                logger.info("incrementing_product", product_id=product.id, item_id=item.id)
                return self._replace_item(item.id, quantity=item.quantity + 1)

        item = SaleItem(
            id=new_line_id(product.id),
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=1,
            category=product.category,
        )
        self._items.append(item)
        logger.info("adding_product", product_id=product.id, item_id=item.id)
        return item

    def add_custom_item(self, name: str, price: float) -> SaleItem:
        """Add a free-form line that cannot be discounted or repriced."""
        require_not_empty(name, errmsg.NAME_REQUIRED)
        require_non_negative(price, errmsg.PRICE_NON_NEGATIVE)

        item = SaleItem(id=new_line_id("custom"), name=name, price=price, quantity=1, is_custom=True)
        self._items.append(item)
        logger.info("adding_custom_item", item_id=item.id, price=price)
        return item

    def increment(self, item_id: str) -> SaleItem:
        item = self.get_item(item_id)
        return self._replace_item(item_id, quantity=item.quantity + 1)

    def decrement(self, item_id: str) -> Optional[SaleItem]:
        """Take one unit off a line; the line is removed at quantity one."""
        item = self.get_item(item_id)
        if item.quantity > 1:
            return self._replace_item(item_id, quantity=item.quantity - 1)
        self.remove(item_id)
        return None

    def remove(self, item_id: str) -> None:
        del self._items[self._index_of(item_id)]
        logger.info("removing_item", item_id=item_id)

    def apply_item_discount(self, item_id: str, discount: Optional[Discount]) -> SaleItem:
        """Set or clear (``None`` / non-positive amount) a line discount."""
        self._require_not_custom(item_id)
        discount = normalize_discount(discount)
        logger.info(
            "applying_item_discount",
            item_id=item_id,
            kind=discount.kind.value if discount else None,
            amount=discount.amount if discount else None,
        )
        return self._replace_item(item_id, discount=discount)

    def apply_price_override(self, item_id: str, new_price: Optional[float]) -> SaleItem:
        """Replace the unit price of a line; clears any line discount.

        ``None`` or a non-positive price removes the override.
        """
        self._require_not_custom(item_id)
        if new_price is not None and new_price <= 0:
            new_price = None
        logger.info("applying_price_override", item_id=item_id, new_price=new_price)
        return self._replace_item(item_id, overridden_price=new_price, discount=None)

    # --- Adjustments ---

    def apply_global_discount(self, discount: Optional[Discount]) -> None:
        """Discount the whole sale, replacing any promotion or redemption.

        An absent discount only clears an existing manual discount.
        """
        discount = normalize_discount(discount)
        if discount is None:
            if isinstance(self.adjustment, ManualDiscount):
                self.adjustment = None
            logger.info("clearing_global_discount")
            return
        logger.info("applying_global_discount", kind=discount.kind.value, amount=discount.amount)
        self.adjustment = ManualDiscount(discount)

    def apply_promotion(self, promotion_id: Any) -> None:
        """Activate a promotion, replacing any manual discount or redemption.

        An empty or unknown id only clears an active promotion.
        """
        parsed = parse_promotion_id(promotion_id)
        if parsed is None:
            if promotion_id:
                logger.warning("unknown_promotion_ignored", promotion_id=str(promotion_id))
            if active_promotion(self.adjustment) is not None:
                self.adjustment = None
            return
        logger.info("applying_promotion", promotion_id=parsed.value)
        self.adjustment = PromotionAdjustment(parsed)

    def apply_loyalty_discount(self, points: int, amount: float) -> None:
        """Redeem ``points`` for a fixed discount of ``amount``."""
        require_positive(amount, errmsg.LOYALTY_AMOUNT_POSITIVE)
        logger.info("applying_loyalty_discount", points=points, amount=amount)
        self.adjustment = LoyaltyRedemption(points=points, amount=amount)

    def redeem_loyalty(self, settings: LoyaltySettings = DEFAULT_LOYALTY) -> LoyaltyRedemption:
        """Redeem the configured points block of the sale's customer."""
        if self.customer is None:
            raise CommandRejectedError(errmsg.NO_CUSTOMER)
        redemption = redemption_for(self.customer, settings)
        if redemption is None:
            raise CommandRejectedError(
                f"{errmsg.INSUFFICIENT_POINTS}: have {self.customer.loyalty_points}, "
                f"need {settings.points_for_redemption}"
            )
        self.apply_loyalty_discount(redemption.points, redemption.amount)
        return redemption

    # --- Customer ---

    def set_customer(self, customer: Customer) -> None:
        self.customer = customer

    def clear_customer(self) -> None:
        self.customer = None

    # --- Lifecycle ---

    def clear(self) -> None:
        self._items = []
        self.customer = None
        self.adjustment = None
        logger.info("clearing_sale")

    def park(self) -> ParkedSale:
        """Snapshot the sale for later; a loyalty redemption is not kept."""
        adjustment = self.adjustment
        if isinstance(adjustment, LoyaltyRedemption):
            adjustment = None
        parked = ParkedSale(
            id=new_line_id("parked"),
            created_at=datetime.now(timezone.utc),
            items=self.items,
            customer=self.customer,
            adjustment=adjustment,
        )
        logger.info("parking_sale", parked_id=parked.id, item_count=len(parked.items))
        return parked

    def load(self, parked: ParkedSale) -> None:
        """Replace the current sale with a parked one."""
        self._items = list(parked.items)
        self.customer = parked.customer
        adjustment = parked.adjustment
        if isinstance(adjustment, LoyaltyRedemption):
            adjustment = None
        self.adjustment = adjustment
        logger.info("loading_sale", parked_id=parked.id, item_count=len(parked.items))
