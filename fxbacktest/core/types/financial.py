"""
Financial helpers for high-performance backtesting calculations.

This module provides float-based helpers optimized for speed in backtesting
scenarios. Balances, prices and lot sizes are plain floats; rounding happens
only at the documented boundaries (lot size, reported percentages).

IMPORTANT PRECISION CONSIDERATIONS:
- Float64 provides ~15-16 significant decimal digits
- Suitable for replaying historical data where performance > precision
- NOT suitable for production trading
- Cumulative rounding errors may occur over many trades
"""

import math

from fxbacktest.core.exceptions.backtest import CalculationError

# Financial calculation precision (number of decimal places)
FINANCIAL_DECIMALS = 8
PRICE_DECIMALS = 5  # Forex quotes carry 5 decimals
LOT_DECIMALS = 2

# Common financial values as float constants
ZERO = 0.0
HUNDRED = 100.0


def round_price(price: float) -> float:
    """Round price to quote precision."""
    return round(price, PRICE_DECIMALS)


def round_amount(amount: float) -> float:
    """Round monetary amount to calculation precision."""
    return round(amount, FINANCIAL_DECIMALS)


def round_lots(lots: float) -> float:
    """Round a position size to lot precision.

    Examples:
        >>> round_lots(0.8333333)
        0.83
    """
    return round(lots, LOT_DECIMALS)


def percent_of(amount: float, percent: float) -> float:
    """Return ``percent`` percent of ``amount``."""
    return amount * (percent / HUNDRED)


def safe_divide(numerator: float, denominator: float, operation: str = "division") -> float:
    """Divide, raising CalculationError instead of returning inf/NaN.

    Args:
        numerator: Dividend
        denominator: Divisor
        operation: Description of the operation for error messages

    Returns:
        The quotient

    Raises:
        CalculationError: If the divisor is zero or the result is not finite
    """
    if denominator == ZERO:
        raise CalculationError(f"Division by zero in {operation}")
    result = numerator / denominator
    if not math.isfinite(result):
        raise CalculationError(f"Non-finite result in {operation}: {result}")
    return result
