"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from enum import Enum
from typing import Any, TypeVar

from fxbacktest.core import constants
from fxbacktest.core.exceptions.backtest import ValidationError

E = TypeVar("E", bound=Enum)


def validate_enum(value: Any, enum_type: type[E], param_name: str) -> E:
    """Validate that a value is (or names) a member of ``enum_type``.

    Args:
        value: Enum member or its string value
        enum_type: Expected enum class
        param_name: Parameter name for error messages

    Returns:
        The validated enum member

    Raises:
        ValidationError: If value is not a valid member
    """
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError as e:
        allowed = ", ".join(str(m.value) for m in enum_type)
        raise ValidationError(
            f"{param_name} must be one of [{allowed}], got {value!r}"
        ) from e


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if value is None or value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or positive.

    Raises:
        ValidationError: If value is negative
    """
    if value is None or value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value


def validate_percentage(value: float, param_name: str = "percentage") -> float:
    """Validate that a value is a valid percentage (0-100].

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated percentage

    Raises:
        ValidationError: If value is not in (0, 100]
    """
    if value is None or value <= 0 or value > 100:
        raise ValidationError(f"{param_name} must be between 0 and 100, got {value}")
    return value


def validate_split(
    tp1_percent: float, tp2_percent: float, tolerance: float = constants.SPLIT_TOLERANCE
) -> None:
    """Validate a two-leg take profit split.

    Each leg must be a valid percentage and together they may not exceed 100.

    Raises:
        ValidationError: If the split is not usable
    """
    validate_percentage(tp1_percent, "tp1_percent")
    validate_percentage(tp2_percent, "tp2_percent")
    if tp1_percent + tp2_percent > 100.0 + tolerance:
        raise ValidationError(
            f"tp1_percent + tp2_percent must not exceed 100, got {tp1_percent + tp2_percent}"
        )
