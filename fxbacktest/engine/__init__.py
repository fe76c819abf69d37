"""
Simulation engine.

Trade sizing, the single-run simulator, statistics and the batch
orchestrator.
"""

from .orchestrator import BatchOrchestrator, discover_strategies, run_batch
from .risk import (
    AGGRESSIVE,
    CONSERVATIVE,
    MODERATE,
    PRESETS,
    RiskCurveParams,
    RiskCurveResult,
    RiskProfile,
    risk_percent_for,
    simulate_risk_curve,
    sizing_balance,
)
from .simulator import SingleRunSimulator, run_single
from .sizing import PIP_VALUE_TABLE, TradeSizer, lookup_pip_value
from .stats import StatsEngine, annualized_sharpe

__all__ = [
    "BatchOrchestrator",
    "discover_strategies",
    "run_batch",
    "SingleRunSimulator",
    "run_single",
    "TradeSizer",
    "PIP_VALUE_TABLE",
    "lookup_pip_value",
    "StatsEngine",
    "annualized_sharpe",
    "RiskProfile",
    "RiskCurveParams",
    "RiskCurveResult",
    "CONSERVATIVE",
    "MODERATE",
    "AGGRESSIVE",
    "PRESETS",
    "risk_percent_for",
    "sizing_balance",
    "simulate_risk_curve",
]
