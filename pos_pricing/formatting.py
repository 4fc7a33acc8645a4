"""Money rounding and display helpers."""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


def round_money(value: float) -> float:
    """Round to cents, halves away from zero."""
    return float(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


def format_money(value: float, symbol: str = "$") -> str:
    """Format an amount for display, e.g. ``$12.50`` or ``-$1.00``."""
    rounded = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    if rounded < 0:
        return f"-{symbol}{-rounded:.2f}"
    return f"{symbol}{abs(rounded):.2f}"
