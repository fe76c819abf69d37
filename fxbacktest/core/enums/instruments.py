"""
Instrument and lot size enumerations.

This module defines the instrument conventions that determine pip scale
and contract size.
"""

from enum import StrEnum


class InstrumentType(StrEnum):
    """
    Supported instrument families.

    The family decides how many price units one pip represents.
    """

    FOREX = "forex"  # 4-decimal quotes
    GOLD = "gold"  # Quoted per ounce
    INDICES = "indices"  # Quoted in points

    @property
    def pip_scale(self) -> float:
        """Price change represented by one pip."""
        return 0.0001 if self == InstrumentType.FOREX else 0.1

    @property
    def pips_per_price_unit(self) -> float:
        """Number of pips in one unit of price."""
        return 10000.0 if self == InstrumentType.FOREX else 10.0

    def to_pips(self, price_distance: float) -> float:
        """Convert an absolute price distance into pips."""
        return abs(price_distance) * self.pips_per_price_unit

    def to_price(self, pips: float) -> float:
        """Convert a pip distance into a price distance."""
        return pips * self.pip_scale


class LotSizeType(StrEnum):
    """
    Standard lot sizes.

    Each lot type maps to a fixed contract size in units.
    """

    STANDARD = "standard"
    MINI = "mini"
    MICRO = "micro"

    @property
    def contract_size(self) -> float:
        """Units per lot."""
        sizes = {
            LotSizeType.STANDARD: 100000.0,
            LotSizeType.MINI: 10000.0,
            LotSizeType.MICRO: 1000.0,
        }
        return sizes[self]


class PriceInputType(StrEnum):
    """How a stop loss or take profit value was supplied."""

    PIPS = "pips"
    PRICE = "price"
