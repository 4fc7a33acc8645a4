"""Promotion evaluator.

Each promotion id in the catalog maps to exactly one rule function. A rule
receives the priced lines of the sale and returns the credit it grants per
item id. Rules that act on individual units (combo, 3x2) first flatten the
matching lines into units, pick the qualifying units, and then aggregate the
per-unit credits back onto the owning line.

Unit ordering is always price ascending with ties broken by cart position,
lowest first, so results are deterministic.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Callable, NamedTuple

import structlog

from .catalog import (
    BEVERAGE_CATEGORIES,
    CANDY_CATEGORIES,
    PROMOTIONS,
    SNACK_CATEGORIES,
    PromotionId,
    parse_promotion_id,
)
from .errors import CatalogMismatchError
from .items import SaleItem
from .pricer import LinePrice, price_line

logger = structlog.get_logger()

BEVERAGE_DISCOUNT_RATE = 0.10
COMBO_CANDY_RATE = 0.50
SNACKS_GROUP_SIZE = 3

Credits = dict[str, float]
PromotionRule = Callable[[Sequence[LinePrice]], Credits]

_RULES: dict[PromotionId, PromotionRule] = {}


class Unit(NamedTuple):
    """A single unit of a sale line."""

    item_id: str
    position: int
    price: float


def promotion_rule(promotion_id: PromotionId) -> Callable[[PromotionRule], PromotionRule]:
    """Register a function as the rule for a promotion id.

    Raises:
        CatalogMismatchError: If the id already has a rule.
    """

    def decorator(func: PromotionRule) -> PromotionRule:
        if promotion_id in _RULES:
            raise CatalogMismatchError(f"duplicate rule for {promotion_id.value}")
        _RULES[promotion_id] = func
        return func

    return decorator


def registered_rules() -> dict[PromotionId, PromotionRule]:
    return dict(_RULES)


def in_categories(line: LinePrice, categories: frozenset[str]) -> bool:
    return line.item.category in categories


def expand_units(lines: Sequence[LinePrice], categories: frozenset[str]) -> list[Unit]:
    """Flatten matching lines into one unit per quantity, in cart order."""
    units = []
    for position, line in enumerate(lines):
        if not in_categories(line, categories):
            continue
        for _ in range(line.item.quantity):
            units.append(Unit(line.item.id, position, line.effective_price))
    return units


def cheapest_first(units: Iterable[Unit]) -> list[Unit]:
    return sorted(units, key=lambda unit: (unit.price, unit.position))


def credit_units(units: Iterable[Unit], rate: float = 1.0) -> Credits:
    """Sum per-unit credits (``rate`` of the unit price) by item id."""
    credits: Credits = {}
    for unit in units:
        credits[unit.item_id] = credits.get(unit.item_id, 0.0) + unit.price * rate
    return credits


@promotion_rule(PromotionId.PROMO_BEBIDAS)
def beverages_rule(lines: Sequence[LinePrice]) -> Credits:
    """10% off every beverage line, after its item discount."""
    credits: Credits = {}
    for line in lines:
        if in_categories(line, BEVERAGE_CATEGORIES):
            credit = line.discounted_line_total * BEVERAGE_DISCOUNT_RATE
            credits[line.item.id] = credits.get(line.item.id, 0.0) + credit
    return credits


@promotion_rule(PromotionId.COMBO_KIOSCO)
def combo_rule(lines: Sequence[LinePrice]) -> Credits:
    """A beverage plus a candy: one unit of the cheapest candy at half price."""
    if not expand_units(lines, BEVERAGE_CATEGORIES):
        return {}
    candy = cheapest_first(expand_units(lines, CANDY_CATEGORIES))
    if not candy:
        return {}
    return credit_units(candy[:1], COMBO_CANDY_RATE)


@promotion_rule(PromotionId.SNACKS_3X2)
def snacks_rule(lines: Sequence[LinePrice]) -> Credits:
    """Every complete group of three snack units frees its cheapest unit."""
    # Groups are consecutive triples of the sorted units, so six units free
    # sorted indices 0 and 3, not the two cheapest overall.
    units = cheapest_first(expand_units(lines, SNACK_CATEGORIES))
    complete = len(units) - len(units) % SNACKS_GROUP_SIZE
    free = [units[start] for start in range(0, complete, SNACKS_GROUP_SIZE)]
    return credit_units(free)


def check_rules_cover_catalog() -> None:
    """Raise CatalogMismatchError unless catalog ids and rules match one to one."""
    catalog_ids = {promotion.id for promotion in PROMOTIONS}
    missing = sorted(p.value for p in catalog_ids - set(_RULES))
    if missing:
        raise CatalogMismatchError(f"promotions without a rule: {', '.join(missing)}")
    orphaned = sorted(p.value for p in set(_RULES) - catalog_ids)
    if orphaned:
        raise CatalogMismatchError(f"rules without a catalog entry: {', '.join(orphaned)}")


def _cap_to_lines(credits: Credits, lines: Sequence[LinePrice]) -> Credits:
    limits = {line.item.id: line.discounted_line_total for line in lines}
    capped = {}
    for item_id, credit in credits.items():
        credit = min(credit, limits.get(item_id, 0.0))
        if credit > 0:
            capped[item_id] = credit
    return capped


def evaluate_priced_lines(lines: Sequence[LinePrice], promotion_id: Any) -> Credits:
    """Return the promotional credit per item id for already priced lines.

    An empty or unknown promotion id yields no credits. No line receives more
    credit than its discounted line total, and zero credits are omitted.
    """
    parsed = parse_promotion_id(promotion_id)
    if parsed is None:
        if promotion_id:
            logger.warning("unknown_promotion_ignored", promotion_id=str(promotion_id))
        return {}

    credits = _cap_to_lines(_RULES[parsed](lines), lines)
    logger.debug(
        "promotion_evaluated",
        promotion_id=parsed.value,
        credited_items=len(credits),
    )
    return credits


def evaluate_promotion(items: Sequence[SaleItem], promotion_id: Any) -> Credits:
    """Return the promotional credit per item id for a list of sale items."""
    return evaluate_priced_lines([price_line(item) for item in items], promotion_id)


check_rules_cover_catalog()
