"""
Memory telemetry for batch runs.

Estimates per-task memory from candle frames and trade records and keeps a
thread-safe running peak.
"""

from collections.abc import Sequence
from threading import Lock

import pandas as pd
from loguru import logger

from fxbacktest.core.models.trade import Trade

BYTES_PER_MB = 1024 * 1024


def estimate_dataframe_memory(df: pd.DataFrame) -> float:
    """Estimate DataFrame memory usage in MB."""
    return float(df.memory_usage(deep=True).sum() / BYTES_PER_MB)


def estimate_trades_memory(trades: Sequence[Trade]) -> float:
    """Estimate the memory held by trade records in MB."""
    if not trades:
        return 0.0
    return estimate_dataframe_memory(pd.DataFrame([t.to_dict() for t in trades]))


class PeakMemoryTracker:
    """Tracks the largest per-task memory estimate seen during a batch."""

    def __init__(self, memory_limit_mb: float | None = None) -> None:
        self._lock = Lock()
        self._peak_mb = 0.0
        self.memory_limit_mb = memory_limit_mb

    @property
    def peak_mb(self) -> float:
        with self._lock:
            return self._peak_mb

    def check_limit(self, strategy_name: str, data_mb: float) -> None:
        """Raise MemoryError if a task's candle data exceeds the limit."""
        if self.memory_limit_mb is not None and data_mb > self.memory_limit_mb:
            logger.warning(f"Memory limit breached by {strategy_name}: {data_mb:.3f}MB")
            raise MemoryError(
                f"Candle data for {strategy_name} ({data_mb:.1f}MB) exceeds memory limit "
                f"({self.memory_limit_mb}MB)"
            )

    def record(self, memory_mb: float) -> float:
        """Fold a task estimate into the peak and return the new peak."""
        with self._lock:
            self._peak_mb = max(self._peak_mb, memory_mb)
            return self._peak_mb
