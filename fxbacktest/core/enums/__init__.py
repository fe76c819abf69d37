"""
Core enumerations for the backtesting core.

This module provides centralized enumerations for domain concepts
like instruments, lot sizes, trade outcomes and strategy types.
"""

from .instruments import InstrumentType, LotSizeType, PriceInputType
from .strategy_types import RiskModel, SimulatorState, StrategyType, TieBreakPolicy
from .trade_types import Direction, TradeOutcome

__all__ = [
    "InstrumentType",
    "LotSizeType",
    "PriceInputType",
    "Direction",
    "TradeOutcome",
    "StrategyType",
    "RiskModel",
    "TieBreakPolicy",
    "SimulatorState",
]
