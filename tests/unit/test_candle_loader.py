"""
Unit tests for price file loading and candle conversion.
"""

import os
from pathlib import Path

import pandas as pd
import pytest

from fxbacktest.core.exceptions.backtest import DataError
from fxbacktest.core.models.candle import Candle
from fxbacktest.infrastructure.data import (
    CandleCSVLoader,
    CandleSeriesValidator,
    candles_to_frame,
    frame_to_candles,
)


@pytest.fixture
def loader() -> CandleCSVLoader:
    return CandleCSVLoader(cache_size=4)


def write_csv(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestCandleCSVLoader:
    """Test suite for CandleCSVLoader."""

    def test_should_load_valid_file(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test loading a clean file with numeric timestamps."""
        path = write_csv(
            tmp_path / "eurusd.csv",
            "timestamp,open,high,low,close,volume\n"
            "1,1.1000,1.1010,1.0990,1.1005,100\n"
            "2,1.1005,1.1020,1.1000,1.1015,120\n",
        )

        df = loader.load(path)

        assert list(df.columns) == ["timestamp", "open", "high", "low", "close", "volume"]
        assert len(df) == 2
        assert df["close"].tolist() == [1.1005, 1.1015]
        assert loader.last_skipped_rows == 0

    def test_should_accept_case_insensitive_headers_without_volume(
        self, loader: CandleCSVLoader, tmp_path: Path
    ) -> None:
        """Test Date header alias and optional volume."""
        path = write_csv(
            tmp_path / "gold.csv",
            "Date,Open,High,Low,Close\n"
            "2024-01-02,2050.0,2060.0,2040.0,2055.0\n"
            "2024-01-03,2055.0,2070.0,2050.0,2065.0\n",
        )

        df = loader.load(path)

        assert df["timestamp"].tolist() == [pd.Timestamp("2024-01-02"), pd.Timestamp("2024-01-03")]
        assert df["volume"].tolist() == [0.0, 0.0]

    def test_should_skip_unusable_rows(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test malformed rows are dropped and counted."""
        path = write_csv(
            tmp_path / "dirty.csv",
            "timestamp,open,high,low,close\n"
            "1,1.1000,1.1010,1.0990,1.1005\n"
            "2,abc,1.1010,1.0990,1.1005\n"
            "3,1.1000,1.1010,1.0990\n"
            "4,-1.1000,1.1010,1.0990,1.1005\n"
            "5,1.1000,1.0980,1.0990,1.1005\n"
            "6,1.1005,1.1020,1.1000,1.1015\n",
        )

        df = loader.load(path)

        assert df["timestamp"].tolist() == [1, 6]
        assert loader.last_skipped_rows == 4

    def test_should_stable_sort_by_timestamp(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test rows are sorted and duplicate timestamps keep file order."""
        path = write_csv(
            tmp_path / "unsorted.csv",
            "timestamp,open,high,low,close\n"
            "3,1.3,1.3,1.3,1.3\n"
            "1,1.1,1.1,1.1,1.1\n"
            "2,1.2,1.2,1.2,1.2\n"
            "1,1.15,1.15,1.15,1.15\n",
        )

        df = loader.load(path)

        assert df["timestamp"].tolist() == [1, 1, 2, 3]
        assert df["close"].tolist() == [1.1, 1.15, 1.2, 1.3]

    def test_should_raise_for_missing_file(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test a missing file is a DataError."""
        with pytest.raises(DataError, match="not found"):
            loader.load(tmp_path / "missing.csv")

    def test_should_raise_for_file_without_rows(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test a header-only file has no usable rows."""
        path = write_csv(tmp_path / "empty.csv", "timestamp,open,high,low,close\n")

        with pytest.raises(DataError, match="No usable rows"):
            loader.load(path)

    def test_should_raise_for_missing_columns(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test required price columns must be present."""
        path = write_csv(tmp_path / "partial.csv", "timestamp,open,close\n1,1.1,1.1\n")

        with pytest.raises(DataError, match="Missing required columns"):
            loader.load(path)

    def test_should_cache_by_path_and_mtime(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test repeated loads hit the cache until the file changes."""
        path = write_csv(tmp_path / "cached.csv", "timestamp,open,high,low,close\n1,1.1,1.1,1.1,1.1\n")

        first = loader.load(path)
        second = loader.load(path)
        assert len(loader.cache) == 1
        pd.testing.assert_frame_equal(first, second)

        write_csv(path, "timestamp,open,high,low,close\n1,1.2,1.2,1.2,1.2\n")
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

        reloaded = loader.load(path)
        assert reloaded["close"].tolist() == [1.2]
        assert len(loader.cache) == 2

    def test_should_return_copies_of_cached_frames(self, loader: CandleCSVLoader, tmp_path: Path) -> None:
        """Test mutating a loaded frame does not change the cache."""
        path = write_csv(tmp_path / "copy.csv", "timestamp,open,high,low,close\n1,1.1,1.1,1.1,1.1\n")

        loader.load(path).loc[0, "close"] = 9.9

        assert loader.load(path)["close"].tolist() == [1.1]


class TestFrameConversion:
    """Tests for frame and candle conversion."""

    def test_should_convert_frame_to_candles(self) -> None:
        """Test rows become Candle records in order."""
        df = pd.DataFrame(
            {"Timestamp": [1, 2], "Open": [1.0, 1.1], "High": [1.2, 1.2], "Low": [0.9, 1.0], "Close": [1.1, 1.15]}
        )

        candles = frame_to_candles(df)

        assert candles == [Candle(1, 1.0, 1.2, 0.9, 1.1), Candle(2, 1.1, 1.2, 1.0, 1.15)]

    def test_should_raise_data_error_for_invalid_row(self) -> None:
        """Test an invalid candle in a frame is a DataError."""
        df = pd.DataFrame(
            {"timestamp": [1], "open": [1.0], "high": [0.5], "low": [0.9], "close": [1.1]}
        )

        with pytest.raises(DataError, match="Invalid candle data"):
            frame_to_candles(df)

    def test_should_convert_candles_back_to_frame(self) -> None:
        """Test candles_to_frame keeps every column."""
        df = candles_to_frame([Candle(1, 1.0, 1.2, 0.9, 1.1, 5.0)])

        assert df.iloc[0].to_dict() == {
            "timestamp": 1,
            "open": 1.0,
            "high": 1.2,
            "low": 0.9,
            "close": 1.1,
            "volume": 5.0,
        }


class TestCandleSeriesValidator:
    """Test suite for CandleSeriesValidator."""

    @pytest.fixture
    def validator(self) -> CandleSeriesValidator:
        return CandleSeriesValidator()

    def test_should_accept_sorted_series_with_duplicates(self, validator: CandleSeriesValidator) -> None:
        """Test duplicate timestamps are allowed."""
        candles = [Candle(ts, 1.0, 1.1, 0.9, 1.0) for ts in (1, 1, 2)]
        assert validator.validate(candles)

    @pytest.mark.parametrize("timestamps", [[], [1, 2], [1, 3, 2]])
    def test_should_reject_unusable_series(
        self, validator: CandleSeriesValidator, timestamps: list[int]
    ) -> None:
        """Test empty, short and unsorted series are DataErrors."""
        candles = [Candle(ts, 1.0, 1.1, 0.9, 1.0) for ts in timestamps]
        with pytest.raises(DataError):
            validator.validate(candles)
