"""Promotion catalog.

A fixed, ordered table of the promotions a sale can activate. The matching
and benefit logic for each id lives in :mod:`pos_pricing.promotions`; the two
are checked against each other at import time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import CatalogMismatchError

BEVERAGES = "Bebidas"
CANDY = "Golosinas"
SNACKS = "Snacks"

# Category labels are matched exactly; candy also answers to its singular form.
BEVERAGE_CATEGORIES = frozenset({BEVERAGES})
CANDY_CATEGORIES = frozenset({CANDY, "Golosina"})
SNACK_CATEGORIES = frozenset({SNACKS})


class PromotionId(str, Enum):
    """Identifiers of the known promotions."""

    PROMO_BEBIDAS = "PROMO_BEBIDAS"
    COMBO_KIOSCO = "COMBO_KIOSCO"
    SNACKS_3X2 = "SNACKS_3X2"


@dataclass(frozen=True)
class Promotion:
    """A catalog entry shown to the cashier."""

    id: PromotionId
    name: str
    description: str


PROMOTIONS: tuple[Promotion, ...] = (
    Promotion(
        id=PromotionId.PROMO_BEBIDAS,
        name="Refrescante 10% OFF",
        description='10% de descuento en todas las "Bebidas".',
    ),
    Promotion(
        id=PromotionId.COMBO_KIOSCO,
        name="Combo Kiosco",
        description='Compra una "Bebida" y obtén 50% de descuento en una "Golosina".',
    ),
    Promotion(
        id=PromotionId.SNACKS_3X2,
        name="3x2 en Snacks",
        description='Compra 3 productos de "Snacks" y paga solo 2 (el de menor precio es gratis).',
    ),
)

_BY_ID = {promotion.id: promotion for promotion in PROMOTIONS}


def parse_promotion_id(value: Any) -> Optional[PromotionId]:
    """Return the matching promotion id, or None for empty or unknown values."""
    if isinstance(value, PromotionId):
        return value
    if not value:
        return None
    try:
        return PromotionId(value)
    except ValueError:
        return None


def get_promotion(value: Any) -> Optional[Promotion]:
    """Look up a catalog entry by id."""
    promotion_id = parse_promotion_id(value)
    if promotion_id is None:
        return None
    return _BY_ID.get(promotion_id)


def check_catalog_complete() -> None:
    """Raise CatalogMismatchError unless every id has exactly one entry."""
    ids = [promotion.id for promotion in PROMOTIONS]
    duplicates = sorted({i.value for i in ids if ids.count(i) > 1})
    if duplicates:
        raise CatalogMismatchError(f"duplicate catalog entries: {', '.join(duplicates)}")
    missing = sorted(p.value for p in set(PromotionId) - set(ids))
    if missing:
        raise CatalogMismatchError(f"promotion ids without catalog entry: {', '.join(missing)}")


check_catalog_complete()
