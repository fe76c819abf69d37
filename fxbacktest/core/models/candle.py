"""
Candle domain model.
"""

from dataclasses import dataclass

from fxbacktest.core.exceptions.backtest import ValidationError


@dataclass(frozen=True, slots=True)
class Candle:
    """One OHLC bar.

    ``timestamp`` is any monotonic sort key (epoch seconds, pandas
    Timestamp, datetime); the simulator only compares it.
    """

    timestamp: object
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        """Validate OHLC relationships after initialization."""
        if min(self.open, self.high, self.low, self.close) <= 0:
            raise ValidationError(f"Candle prices must be positive at {self.timestamp}")
        if self.high < max(self.open, self.close, self.low) or self.low > min(
            self.open, self.close
        ):
            raise ValidationError(f"Invalid OHLC relationship at {self.timestamp}")
        if self.volume < 0:
            raise ValidationError(f"Volume must be non-negative at {self.timestamp}")

    @property
    def is_bullish(self) -> bool:
        """Close above open."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Close below open."""
        return self.close < self.open

    @property
    def range(self) -> float:
        """High minus low."""
        return self.high - self.low
