"""Pricing and promotions engine for point-of-sale checkouts."""

from .errors import (
    PricingError,
    InvariantViolationError,
    CatalogMismatchError,
    CommandRejectedError,
    ConfigurationError,
    errmsg,
)
from .discount import (
    Discount,
    DiscountKind,
    make_discount,
    percentage,
    fixed,
)
from .catalog import (
    BEVERAGES,
    CANDY,
    SNACKS,
    PROMOTIONS,
    Promotion,
    PromotionId,
    get_promotion,
    parse_promotion_id,
)
from .items import Customer, Product, SaleItem
from .adjustment import (
    Adjustment,
    LoyaltyRedemption,
    ManualDiscount,
    PromotionAdjustment,
    resolve_adjustment,
)
from .cart import Cart
from .pricer import LinePrice, price_line
from .promotions import evaluate_priced_lines, evaluate_promotion, expand_units
from .aggregator import Totals, compute_totals, totals_for
from .config import (
    BUSINESS_TEMPLATES,
    DEFAULT_LOYALTY,
    LoyaltySettings,
    configure_logging,
    load_loyalty_settings,
)
from .loyalty import is_eligible, points_earned, redemption_for, remaining_points
from .sale import ParkedSale, Sale
from .transaction import (
    PaymentMethod,
    Transaction,
    TransactionType,
    create_refund,
    finalize_sale,
    refund_total,
)
from .formatting import format_money, round_money

__all__ = [
    # Errors
    "PricingError",
    "InvariantViolationError",
    "CatalogMismatchError",
    "CommandRejectedError",
    "ConfigurationError",
    "errmsg",
    # Discounts
    "Discount",
    "DiscountKind",
    "make_discount",
    "percentage",
    "fixed",
    # Catalog
    "BEVERAGES",
    "CANDY",
    "SNACKS",
    "PROMOTIONS",
    "Promotion",
    "PromotionId",
    "get_promotion",
    "parse_promotion_id",
    # Records
    "Customer",
    "Product",
    "SaleItem",
    "Cart",
    # Adjustments
    "Adjustment",
    "LoyaltyRedemption",
    "ManualDiscount",
    "PromotionAdjustment",
    "resolve_adjustment",
    # Engine
    "LinePrice",
    "price_line",
    "evaluate_priced_lines",
    "evaluate_promotion",
    "expand_units",
    "Totals",
    "compute_totals",
    "totals_for",
    # Config
    "BUSINESS_TEMPLATES",
    "DEFAULT_LOYALTY",
    "LoyaltySettings",
    "configure_logging",
    "load_loyalty_settings",
    # Loyalty
    "is_eligible",
    "points_earned",
    "redemption_for",
    "remaining_points",
    # Sale session
    "ParkedSale",
    "Sale",
    # Transactions
    "PaymentMethod",
    "Transaction",
    "TransactionType",
    "create_refund",
    "finalize_sale",
    "refund_total",
    # Presentation
    "format_money",
    "round_money",
]
