"""Item factories shared across pricing tests."""

from typing import Optional

from pos_pricing import BEVERAGES, CANDY, SNACKS, Discount, SaleItem


def make_item(
    item_id: str,
    price: float,
    quantity: int = 1,
    category: Optional[str] = None,
    discount: Optional[Discount] = None,
    overridden_price: Optional[float] = None,
    is_custom: bool = False,
) -> SaleItem:
    """Build a sale line with a name derived from its id."""
    return SaleItem(
        id=item_id,
        name=item_id.title(),
        price=price,
        quantity=quantity,
        category=category,
        product_id=None if is_custom else f"prod-{item_id}",
        discount=discount,
        overridden_price=overridden_price,
        is_custom=is_custom,
    )


def drink(item_id: str, price: float, quantity: int = 1, **kwargs) -> SaleItem:
    return make_item(item_id, price, quantity, category=BEVERAGES, **kwargs)


def candy(item_id: str, price: float, quantity: int = 1, **kwargs) -> SaleItem:
    return make_item(item_id, price, quantity, category=CANDY, **kwargs)


def snack(item_id: str, price: float, quantity: int = 1, **kwargs) -> SaleItem:
    return make_item(item_id, price, quantity, category=SNACKS, **kwargs)
