"""Validation helpers for sale command precondition checks."""

from collections.abc import Mapping
from typing import Any

from .errors import CommandRejectedError


def require_present(key: str, items: Mapping[str, Any], error_msg: str) -> None:
    """Require that a key is present in a mapping."""
    if key not in items:
        raise CommandRejectedError(error_msg)


def require_not_empty(value: Any, error_msg: str) -> None:
    """Require that a value (string, sequence) is non-empty."""
    if not value:
        raise CommandRejectedError(error_msg)


def require_positive(value: float, error_msg: str) -> None:
    """Require that a value is greater than zero."""
    if value <= 0:
        raise CommandRejectedError(error_msg)


def require_non_negative(value: float, error_msg: str) -> None:
    """Require that a value is zero or greater."""
    if value < 0:
        raise CommandRejectedError(error_msg)


def require_at_least(value: float, minimum: float, error_msg: str) -> None:
    """Require that a value is not below a minimum."""
    if value < minimum:
        raise CommandRejectedError(error_msg)
