"""
Candle series validation.

Checks that a series can be simulated at all and warns about data-quality
anomalies that do not stop a run.
"""

from collections.abc import Sequence

from loguru import logger

from fxbacktest.core import constants
from fxbacktest.core.exceptions.backtest import DataError
from fxbacktest.core.models.candle import Candle


class CandleSeriesValidator:
    """
    Validator for candle series handed to the simulator.

    Features:
    - Length validation (at least a previous, signal and resolution candle)
    - Ascending timestamp order, duplicates allowed
    - Data quality warnings for extreme ranges
    """

    def __init__(self, min_candles: int = constants.MIN_CANDLES) -> None:
        self.min_candles = min_candles

    def validate(self, candles: Sequence[Candle]) -> bool:
        """
        Validate a candle series.

        Returns:
            True if the series is usable

        Raises:
            DataError: If the series is empty, too short or unsorted
        """
        if not candles:
            raise DataError("Candle series is empty")
        if len(candles) < self.min_candles:
            raise DataError(
                f"Candle series has {len(candles)} candles, at least {self.min_candles} required"
            )
        self._validate_ordering(candles)
        self._validate_quality(candles)
        return True

    def _validate_ordering(self, candles: Sequence[Candle]) -> None:
        for i in range(1, len(candles)):
            try:
                out_of_order = candles[i].timestamp < candles[i - 1].timestamp  # type: ignore[operator]
            except TypeError as e:
                raise DataError(f"Timestamps at candles {i - 1} and {i} are not comparable") from e
            if out_of_order:
                raise DataError(f"Candle series is not sorted by timestamp at candle {i}")

    def _validate_quality(self, candles: Sequence[Candle]) -> None:
        extreme_count = sum(1 for c in candles if c.range / c.low > 0.5)
        if extreme_count:
            logger.warning(f"Found {extreme_count} candles with extreme price ranges (>50%)")
