"""Sale item, product and customer records."""

from dataclasses import dataclass
from typing import Optional

from .discount import Discount


@dataclass(frozen=True)
class Product:
    """A catalog product that can be added to a sale."""

    id: str
    name: str
    price: float
    category: str


@dataclass(frozen=True)
class SaleItem:
    """One line of a sale.

    ``overridden_price`` replaces ``price`` in every computation. Custom
    (free-form) items never carry a discount or override.
    """

    id: str
    name: str
    price: float
    quantity: int = 1
    category: Optional[str] = None
    product_id: Optional[str] = None
    discount: Optional[Discount] = None
    overridden_price: Optional[float] = None
    is_custom: bool = False

    @property
    def effective_price(self) -> float:
        if self.overridden_price is not None:
            return self.overridden_price
        return self.price

    def is_plain(self) -> bool:
        """True when the line carries no discount and no price override."""
        return self.discount is None and self.overridden_price is None


@dataclass(frozen=True)
class Customer:
    """Customer associated with a sale."""

    id: str
    name: str
    loyalty_points: int = 0
