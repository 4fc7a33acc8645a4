"""Error types for the pricing engine."""

from typing import Optional


class errmsg:
    """Error message constants for sale sessions."""

    ITEM_NOT_IN_SALE = "Item not in sale"
    CUSTOM_ITEM_LOCKED = "Custom items cannot carry a discount or price override"
    PRICE_NON_NEGATIVE = "Price cannot be negative"
    NAME_REQUIRED = "Item name is required"
    NO_CUSTOMER = "No customer associated with the sale"
    INSUFFICIENT_POINTS = "Insufficient loyalty points"
    LOYALTY_AMOUNT_POSITIVE = "Loyalty discount must be positive"
    SALE_EMPTY = "Sale is empty"
    INSUFFICIENT_PAYMENT = "Amount received does not cover the total"
    NOT_A_SALE = "Only sales can be refunded"
    RETURN_QUANTITY_RANGE = "Return quantity exceeds the quantity sold"
    RETURN_QUANTITY_POSITIVE = "Return quantity must be positive"
    NOTHING_TO_RETURN = "No items selected for return"


class PricingError(Exception):
    """Base class for pricing engine errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class InvariantViolationError(PricingError):
    """Input reached the engine in a state no legitimate caller produces."""

    def __init__(self, message: str):
        super().__init__(f"invariant violated: {message}")


class CatalogMismatchError(InvariantViolationError):
    """Promotion catalog entries and promotion rules are out of sync."""


class CommandRejectedError(PricingError):
    """Sale command was rejected due to business rule violation."""


class ConfigurationError(PricingError):
    """A configuration value could not be parsed."""

    def __init__(self, name: str, cause: Optional[Exception] = None):
        super().__init__(f"invalid configuration value for {name}", cause)
        self.name = name
