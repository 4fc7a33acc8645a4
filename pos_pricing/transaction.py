"""Finalized transactions and refunds.

A transaction is the immutable record handed to storage when a sale is
paid. Monetary fields are rounded to cents here, at the persistence
boundary; everything upstream keeps full precision.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog

from .adjustment import Adjustment, active_promotion, loyalty_redemption
from .catalog import PromotionId
from .config import DEFAULT_LOYALTY, LoyaltySettings
from .discount import DiscountKind
from .errors import CommandRejectedError, errmsg
from .formatting import round_money
from .items import SaleItem
from .loyalty import points_earned, remaining_points
from .sale import Sale
from .validation import (
    require_at_least,
    require_not_empty,
    require_positive,
    require_present,
)

logger = structlog.get_logger()


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    REFUND = "refund"


class TransactionType(str, Enum):
    SALE = "sale"
    REFUND = "refund"


@dataclass(frozen=True)
class Transaction:
    """A completed sale or refund."""

    id: str
    created_at: datetime
    type: TransactionType
    items: tuple[SaleItem, ...]
    subtotal: float
    discount_amount: float
    total: float
    payment_method: PaymentMethod
    amount_received: Optional[float] = None
    change: Optional[float] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    adjustment: Optional[Adjustment] = None
    active_promotion: Optional[PromotionId] = None
    points_redeemed: int = 0
    points_earned: int = 0
    loyalty_balance: Optional[int] = None
    original_transaction_id: Optional[str] = None


def finalize_sale(
    sale: Sale,
    payment_method: PaymentMethod,
    amount_received: Optional[float] = None,
    settings: LoyaltySettings = DEFAULT_LOYALTY,
) -> Transaction:
    """Snapshot a paid sale into a transaction record.

    Cash payments default to the exact total and must cover it; the
    change is the difference. Points are only earned when a customer is
    associated with the sale; ``loyalty_balance`` is the customer's points
    after this sale's redemption and accrual.

    Raises:
        CommandRejectedError: If the sale is empty or the cash tendered is short.
    """
    cart = sale.snapshot()
    require_not_empty(cart.items, errmsg.SALE_EMPTY)

    totals = sale.totals()
    total = round_money(totals.final_total)

    change = None
    if payment_method is PaymentMethod.CASH:
        received = total if amount_received is None else round_money(amount_received)
        require_at_least(received, total, errmsg.INSUFFICIENT_PAYMENT)
        change = round_money(received - total)
        amount_received = received
    elif amount_received is not None:
        amount_received = round_money(amount_received)

    customer = sale.customer
    redemption = loyalty_redemption(cart.adjustment)
    earned = points_earned(total, settings) if customer is not None else 0
    redeemed = redemption.points if redemption and customer else 0
    balance = None
    if customer is not None:
        balance = remaining_points(customer.loyalty_points, redeemed) + earned

    transaction = Transaction(
        id=f"sale-{uuid.uuid4()}",
        created_at=datetime.now(timezone.utc),
        type=TransactionType.SALE,
        items=cart.items,
        subtotal=round_money(totals.subtotal),
        discount_amount=round_money(totals.total_discount),
        total=total,
        payment_method=payment_method,
        amount_received=amount_received,
        change=change,
        customer_id=customer.id if customer else None,
        customer_name=customer.name if customer else None,
        adjustment=cart.adjustment,
        active_promotion=active_promotion(cart.adjustment),
        points_redeemed=redeemed,
        points_earned=earned,
        loyalty_balance=balance,
    )

    logger.info(
        "completing_sale",
        transaction_id=transaction.id,
        total=transaction.total,
        payment_method=payment_method.value,
        points_earned=earned,
        loyalty_balance=balance,
    )
    return transaction


def _value_after_item_discount(item: SaleItem, quantity: int) -> float:
    value = item.effective_price * quantity
    if item.discount is None:
        return value
    if item.discount.kind is DiscountKind.PERCENTAGE:
        return item.discount.apply(value)
    # Fixed line discounts are spread evenly over the units sold.
    per_unit = max(0.0, item.discount.amount) / item.quantity
    return max(0.0, value - per_unit * quantity)


def refund_total(transaction: Transaction, quantities: Mapping[str, int]) -> float:
    """Amount to give back for returning ``quantities`` (item id -> units).

    Each returned unit is valued after its item discount, then reduced by
    the share of the sale-wide discount (promotion, manual or loyalty) the
    sale received.

    Raises:
        CommandRejectedError: For unknown items or quantities out of range.
    """
    if transaction.type is not TransactionType.SALE:
        return 0.0

    by_id = {item.id: item for item in transaction.items}

    after_item_discounts = sum(
        _value_after_item_discount(item, item.quantity) for item in transaction.items
    )
    sale_wide = after_item_discounts - transaction.total
    ratio = sale_wide / after_item_discounts if after_item_discounts > 0 else 0.0

    refund = 0.0
    for item_id, quantity in quantities.items():
        require_present(item_id, by_id, errmsg.ITEM_NOT_IN_SALE)
        require_positive(quantity, errmsg.RETURN_QUANTITY_POSITIVE)
        item = by_id[item_id]
        if quantity > item.quantity:
            raise CommandRejectedError(errmsg.RETURN_QUANTITY_RANGE)
        refund += _value_after_item_discount(item, quantity) * (1 - ratio)

    return max(0.0, refund)


def create_refund(transaction: Transaction, quantities: Mapping[str, int]) -> Transaction:
    """Build the refund transaction for returning items of a sale.

    Raises:
        CommandRejectedError: If the original is not a sale or nothing is returned.
    """
    if transaction.type is not TransactionType.SALE:
        raise CommandRejectedError(errmsg.NOT_A_SALE)
    returned = {item_id: qty for item_id, qty in quantities.items() if qty}
    require_not_empty(returned, errmsg.NOTHING_TO_RETURN)

    amount = round_money(refund_total(transaction, returned))
    items = tuple(
        replace(item, quantity=returned[item.id])
        for item in transaction.items
        if item.id in returned
    )

    refund = Transaction(
        id=f"refund-{uuid.uuid4()}",
        created_at=datetime.now(timezone.utc),
        type=TransactionType.REFUND,
        items=items,
        subtotal=0.0,
        discount_amount=0.0,
        total=-amount,
        payment_method=PaymentMethod.REFUND,
        customer_id=transaction.customer_id,
        customer_name=transaction.customer_name,
        original_transaction_id=transaction.id,
    )

    logger.info(
        "creating_refund",
        transaction_id=refund.id,
        original_transaction_id=transaction.id,
        amount=amount,
    )
    return refund
