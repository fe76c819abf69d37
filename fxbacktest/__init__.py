"""
fxbacktest: trade-by-trade strategy backtesting over OHLC price series.
"""

from fxbacktest.core.enums import (
    Direction,
    InstrumentType,
    LotSizeType,
    RiskModel,
    StrategyType,
    TieBreakPolicy,
    TradeOutcome,
)
from fxbacktest.core.exceptions.backtest import (
    BacktestException,
    CalculationError,
    ConfigurationError,
    DataError,
    TaskError,
    ValidationError,
)
from fxbacktest.core.models.backtest import BacktestConfig, BacktestResult
from fxbacktest.core.models.batch import BatchPolicy, BatchResult, StrategyDefinition
from fxbacktest.core.models.candle import Candle
from fxbacktest.core.models.trade import Trade, TradeParameters, TradeResult
from fxbacktest.core.settings import BacktestSettings, load_settings
from fxbacktest.engine import (
    BatchOrchestrator,
    SingleRunSimulator,
    StatsEngine,
    TradeSizer,
    discover_strategies,
    run_batch,
    run_single,
)
from fxbacktest.infrastructure.data import CandleCSVLoader

__version__ = "0.1.0"

__all__ = [
    "BacktestConfig",
    "BacktestResult",
    "BacktestSettings",
    "BatchOrchestrator",
    "BatchPolicy",
    "BatchResult",
    "Candle",
    "CandleCSVLoader",
    "Direction",
    "InstrumentType",
    "LotSizeType",
    "RiskModel",
    "SingleRunSimulator",
    "StatsEngine",
    "StrategyDefinition",
    "StrategyType",
    "TieBreakPolicy",
    "Trade",
    "TradeOutcome",
    "TradeParameters",
    "TradeResult",
    "TradeSizer",
    "discover_strategies",
    "load_settings",
    "run_batch",
    "run_single",
    "BacktestException",
    "CalculationError",
    "ConfigurationError",
    "DataError",
    "TaskError",
    "ValidationError",
]
