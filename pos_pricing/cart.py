"""Immutable cart snapshot read by the pricing engine."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .adjustment import Adjustment
from .items import SaleItem


@dataclass(frozen=True)
class Cart:
    """Sale lines in display order plus the single active adjustment."""

    items: tuple[SaleItem, ...] = ()
    adjustment: Optional[Adjustment] = None

    @classmethod
    def of(cls, items: Iterable[SaleItem], adjustment: Optional[Adjustment] = None) -> "Cart":
        return cls(items=tuple(items), adjustment=adjustment)

    def is_empty(self) -> bool:
        return not self.items
