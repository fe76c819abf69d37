"""
Batch run models: strategy definitions, batch policy and aggregated results.
"""

import os
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from fxbacktest.core import constants
from fxbacktest.core.exceptions.backtest import ConfigurationError

from .backtest import BacktestResult
from .candle import Candle

CandleData = pd.DataFrame | Sequence[Candle]
CandleSource = str | Path | CandleData | Callable[[], CandleData]


@dataclass(frozen=True)
class StrategyDefinition:
    """One strategy submitted to a batch run.

    ``source`` is a price file path, an in-memory frame or candle sequence,
    or a zero-argument callable producing one of those.
    """

    name: str
    source: CandleSource
    config_override: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ConfigurationError("name", "strategy name cannot be empty")


def default_worker_count() -> int:
    return max(1, min(os.cpu_count() or 1, constants.MAX_WORKER_COUNT))


@dataclass(frozen=True)
class BatchPolicy:
    """Concurrency and telemetry policy for a batch run."""

    worker_count: int = field(default_factory=default_worker_count)
    batch_size: int = constants.DEFAULT_BATCH_SIZE
    track_memory: bool = True
    memory_limit_mb: float | None = None
    show_progress: bool = False

    def validate(self) -> "BatchPolicy":
        """Validate policy values.

        Raises:
            ConfigurationError: Naming the first invalid field
        """
        if not 1 <= self.worker_count <= constants.MAX_WORKER_COUNT:
            raise ConfigurationError(
                "worker_count",
                f"must be between 1 and {constants.MAX_WORKER_COUNT}, got {self.worker_count}",
            )
        if not 1 <= self.batch_size <= constants.MAX_BATCH_SIZE:
            raise ConfigurationError(
                "batch_size",
                f"must be between 1 and {constants.MAX_BATCH_SIZE}, got {self.batch_size}",
            )
        if self.memory_limit_mb is not None and self.memory_limit_mb <= 0:
            raise ConfigurationError(
                "memory_limit_mb", f"must be positive, got {self.memory_limit_mb}"
            )
        return self


@dataclass
class BatchTelemetry:
    """Timing and memory figures recorded during a batch run."""

    task_durations: dict[str, float] = field(default_factory=dict)  # Seconds per strategy
    total_duration: float = 0.0
    peak_memory_mb: float = 0.0
    batches_processed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_durations": dict(self.task_durations),
            "total_duration": self.total_duration,
            "peak_memory_mb": round(self.peak_memory_mb, 2),
            "batches_processed": self.batches_processed,
        }


@dataclass
class BatchResult:
    """Results from a batch run.

    ``strategy_names`` keeps the original submission order of every
    submitted strategy; ``results`` only holds the ones that completed.
    """

    strategy_names: list[str]
    results: dict[str, BacktestResult] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    average_win_rate: float = 0.0
    average_profit_factor: float = 0.0
    average_max_drawdown: float = 0.0
    best_strategy: str = ""
    worst_strategy: str = ""
    telemetry: BatchTelemetry = field(default_factory=BatchTelemetry)

    @property
    def submitted_count(self) -> int:
        return len(self.strategy_names)

    @property
    def excluded_count(self) -> int:
        """Strategies that did not produce a result."""
        return self.submitted_count - len(self.results)

    def ordered_results(self) -> Iterator[tuple[str, BacktestResult]]:
        """Iterate completed results in submission order."""
        for name in self.strategy_names:
            if name in self.results:
                yield name, self.results[name]

    def summary_frame(self) -> pd.DataFrame:
        """Per-strategy summary rows in submission order."""
        rows = [
            {
                "strategy": name,
                "total_trades": result.total_trades,
                "win_rate": result.win_rate,
                "profit_factor": result.profit_factor,
                "net_profit": result.net_profit,
                "max_drawdown_percent": result.stats.max_drawdown_percent,
                "sharpe_ratio": result.stats.sharpe_ratio,
            }
            for name, result in self.ordered_results()
        ]
        columns = [
            "strategy",
            "total_trades",
            "win_rate",
            "profit_factor",
            "net_profit",
            "max_drawdown_percent",
            "sharpe_ratio",
        ]
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self) -> dict[str, Any]:
        """Convert batch results to dictionary."""
        return {
            "strategy_names": list(self.strategy_names),
            "results": {name: result.to_dict() for name, result in self.ordered_results()},
            "failures": dict(self.failures),
            "excluded_count": self.excluded_count,
            "average_win_rate": self.average_win_rate,
            "average_profit_factor": self.average_profit_factor,
            "average_max_drawdown": self.average_max_drawdown,
            "best_strategy": self.best_strategy,
            "worst_strategy": self.worst_strategy,
            "telemetry": self.telemetry.to_dict(),
        }
