"""
Price file loading.

Reads ``timestamp,open,high,low,close[,volume]`` files into pandas frames,
skipping rows that cannot be used, and keeps recently loaded frames in a
thread-safe LRU cache keyed by file path and modification time.
"""

from collections.abc import Sequence
from pathlib import Path
from threading import RLock

import pandas as pd
from cachetools import LRUCache
from loguru import logger

from fxbacktest.core.exceptions.backtest import DataError, ValidationError
from fxbacktest.core.models.candle import Candle

CANDLE_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]
TIMESTAMP_ALIASES = ("timestamp", "datetime", "date", "time")


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lower-case headers and map the first timestamp alias to ``timestamp``."""
    renamed = df.rename(columns=lambda c: str(c).strip().lower())
    if "timestamp" not in renamed.columns:
        for alias in TIMESTAMP_ALIASES:
            if alias in renamed.columns:
                renamed = renamed.rename(columns={alias: "timestamp"})
                break
    missing = [c for c in ["timestamp", *PRICE_COLUMNS] if c not in renamed.columns]
    if missing:
        raise DataError(f"Missing required columns: {missing}")
    return renamed


def _parse_timestamps(raw: pd.Series) -> pd.Series:
    """Numeric epochs stay numeric; anything else is parsed as a datetime.

    A column is treated as epochs when at least half its values are numbers.
    """
    numeric = pd.to_numeric(raw, errors="coerce")
    if numeric.notna().any() and numeric.notna().sum() * 2 >= len(raw):
        return numeric
    return pd.to_datetime(raw, errors="coerce", format="mixed")


class CandleCSVLoader:
    """Loads price files into validated, timestamp-sorted frames."""

    DEFAULT_CACHE_SIZE = 64

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")
        self.cache: LRUCache[tuple[str, int], pd.DataFrame] = LRUCache(maxsize=cache_size)
        self._cache_lock = RLock()
        self.last_skipped_rows = 0

    def load(self, path: str | Path) -> pd.DataFrame:
        """Load a price file.

        Returns:
            Frame with columns timestamp, open, high, low, close, volume

        Raises:
            DataError: If the file is missing, unreadable or has no usable rows
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise DataError(f"Data file not found: {file_path}")

        key = self._cache_key(file_path)
        with self._cache_lock:
            cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {file_path.name}")
            return cached.copy()

        df = self._read(file_path)
        with self._cache_lock:
            self.cache[key] = df
        return df.copy()

    def clear_cache(self) -> None:
        with self._cache_lock:
            self.cache.clear()

    @staticmethod
    def _cache_key(file_path: Path) -> tuple[str, int]:
        return str(file_path.resolve()), file_path.stat().st_mtime_ns

    def _read(self, file_path: Path) -> pd.DataFrame:
        logger.debug(f"Loading file: {file_path}")
        try:
            raw = pd.read_csv(file_path, dtype=str, skipinitialspace=True)
        except pd.errors.EmptyDataError as e:
            raise DataError(f"Price file is empty: {file_path.name}") from e
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
            logger.error(f"Failed to read {file_path.name}: {e}")
            raise DataError(f"Failed to read price file: {file_path.name}") from e

        df, skipped = self.clean(raw)
        self.last_skipped_rows = skipped
        if skipped:
            logger.warning(f"Skipped {skipped} unusable rows in {file_path.name}")
        if df.empty:
            raise DataError(f"No usable rows in price file: {file_path.name}")
        logger.info(f"Loaded {len(df)} candles from {file_path.name}")
        return df

    @staticmethod
    def clean(raw: pd.DataFrame) -> tuple[pd.DataFrame, int]:
        """Coerce types, drop unusable rows and stable-sort by timestamp.

        Returns:
            The cleaned frame and the number of rows dropped
        """
        df = normalize_columns(raw)
        out = pd.DataFrame({"timestamp": _parse_timestamps(df["timestamp"])})
        for col in PRICE_COLUMNS:
            out[col] = pd.to_numeric(df[col], errors="coerce")
        if "volume" in df.columns:
            out["volume"] = pd.to_numeric(df["volume"], errors="coerce").fillna(0.0)
        else:
            out["volume"] = 0.0

        valid = out[["timestamp", *PRICE_COLUMNS]].notna().all(axis=1)
        valid &= (out[PRICE_COLUMNS] > 0).all(axis=1)
        valid &= out["high"] >= out[["open", "close", "low"]].max(axis=1)
        valid &= out["low"] <= out[["open", "close"]].min(axis=1)
        valid &= out["volume"] >= 0

        skipped = int((~valid).sum())
        cleaned = (
            out[valid]
            .sort_values("timestamp", kind="stable")
            .reset_index(drop=True)
            .astype({col: "float64" for col in [*PRICE_COLUMNS, "volume"]})
        )
        return cleaned[CANDLE_COLUMNS], skipped


def frame_to_candles(df: pd.DataFrame) -> list[Candle]:
    """Convert a price frame into Candle records, preserving row order.

    Raises:
        DataError: If columns are missing or a row is not a valid candle
    """
    frame = normalize_columns(df)
    volumes = frame["volume"] if "volume" in frame.columns else [0.0] * len(frame)
    try:
        return [
            Candle(ts, float(o), float(h), float(lo), float(c), float(v))
            for ts, o, h, lo, c, v in zip(
                frame["timestamp"],
                frame["open"],
                frame["high"],
                frame["low"],
                frame["close"],
                volumes,
                strict=True,
            )
        ]
    except (ValidationError, TypeError, ValueError) as e:
        raise DataError(f"Invalid candle data: {e}") from e


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Inverse of ``frame_to_candles``."""
    return pd.DataFrame(
        {
            "timestamp": [c.timestamp for c in candles],
            "open": [c.open for c in candles],
            "high": [c.high for c in candles],
            "low": [c.low for c in candles],
            "close": [c.close for c in candles],
            "volume": [c.volume for c in candles],
        },
        columns=CANDLE_COLUMNS,
    )
