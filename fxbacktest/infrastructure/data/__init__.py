"""
Price data infrastructure.

This module provides price file loading, caching and candle series
validation for the simulator.
"""

from .candle_loader import CandleCSVLoader, candles_to_frame, frame_to_candles
from .candle_validator import CandleSeriesValidator

__all__ = ["CandleCSVLoader", "CandleSeriesValidator", "candles_to_frame", "frame_to_candles"]
