"""Configuration for the pricing engine.

Loyalty settings and log level are read from the environment:

    POS_BUSINESS_TYPE:          template to start from (kiosco, cafe, ferreteria, ropa)
    POS_POINTS_PER_DOLLAR:      points accrued per currency unit spent
    POS_POINTS_FOR_REDEMPTION:  points balance required to redeem
    POS_REDEMPTION_VALUE:       fixed discount granted by a redemption
    POS_LOG_LEVEL:              structlog filtering level (default INFO)
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Callable, Optional

import structlog

from .errors import ConfigurationError


@dataclass(frozen=True)
class LoyaltySettings:
    """Accrual and redemption parameters for the loyalty program."""

    points_per_dollar: float = 1.0
    points_for_redemption: int = 100
    redemption_value: float = 5.0


DEFAULT_LOYALTY = LoyaltySettings()

BUSINESS_TEMPLATES: dict[str, LoyaltySettings] = {
    "kiosco": LoyaltySettings(points_per_dollar=0.1, points_for_redemption=500, redemption_value=1000),
    "cafe": LoyaltySettings(points_per_dollar=1, points_for_redemption=100, redemption_value=1800),
    "ferreteria": LoyaltySettings(points_per_dollar=0.5, points_for_redemption=2000, redemption_value=5000),
    "ropa": LoyaltySettings(points_per_dollar=1, points_for_redemption=5000, redemption_value=10000),
}

_LOYALTY_FIELDS: dict[str, tuple[str, Callable[[str], float]]] = {
    "POS_POINTS_PER_DOLLAR": ("points_per_dollar", float),
    "POS_POINTS_FOR_REDEMPTION": ("points_for_redemption", int),
    "POS_REDEMPTION_VALUE": ("redemption_value", float),
}


def load_loyalty_settings(environ: Optional[Mapping[str, str]] = None) -> LoyaltySettings:
    """Build loyalty settings from the environment.

    Raises:
        ConfigurationError: If the template is unknown or a value does not parse.
    """
    if environ is None:
        environ = os.environ

    settings = DEFAULT_LOYALTY
    business_type = environ.get("POS_BUSINESS_TYPE", "").strip().lower()
    if business_type:
        if business_type not in BUSINESS_TEMPLATES:
            raise ConfigurationError(
                "POS_BUSINESS_TYPE", ValueError(f"unknown business type {business_type!r}")
            )
        settings = BUSINESS_TEMPLATES[business_type]

    overrides = {}
    for variable, (field_name, parse) in _LOYALTY_FIELDS.items():
        raw = environ.get(variable)
        if raw is None or not raw.strip():
            continue
        try:
            value = parse(raw.strip())
        except ValueError as e:
            raise ConfigurationError(variable, e) from e
        if value < 0:
            raise ConfigurationError(variable, ValueError("must not be negative"))
        overrides[field_name] = value

    return replace(settings, **overrides)


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> int:
    """Resolve POS_LOG_LEVEL to a numeric level."""
    if environ is None:
        environ = os.environ
    name = environ.get("POS_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigurationError("POS_LOG_LEVEL", ValueError(f"unknown level {name!r}"))
    return level


def configure_logging(level: Optional[int] = None) -> None:
    """Configure structlog with JSON rendering and ISO timestamps."""
    if level is None:
        level = get_log_level()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
