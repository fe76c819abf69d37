"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    FINANCIAL_DECIMALS,
    HUNDRED,
    LOT_DECIMALS,
    PRICE_DECIMALS,
    ZERO,
    percent_of,
    round_amount,
    round_lots,
    round_price,
    safe_divide,
)

__all__ = [
    # Utility functions
    "round_price",
    "round_amount",
    "round_lots",
    "percent_of",
    "safe_divide",
    # Constants
    "FINANCIAL_DECIMALS",
    "PRICE_DECIMALS",
    "LOT_DECIMALS",
    "ZERO",
    "HUNDRED",
]
