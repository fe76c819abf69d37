"""
Backtest configuration and results models.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from fxbacktest.core import constants
from fxbacktest.core.enums import (
    InstrumentType,
    LotSizeType,
    RiskModel,
    StrategyType,
    TieBreakPolicy,
)
from fxbacktest.core.exceptions.backtest import ConfigurationError

from .stats import EquityStats
from .trade import Trade

_ENUM_FIELDS = {
    "strategy_type": StrategyType.parse,
    "instrument": InstrumentType,
    "lot_size": LotSizeType,
    "risk_model": RiskModel,
    "tie_break": TieBreakPolicy,
}


@dataclass(frozen=True)
class BacktestConfig:
    """Configuration for a single-strategy simulation."""

    initial_balance: float = constants.DEFAULT_INITIAL_BALANCE
    risk_per_trade: float = constants.DEFAULT_RISK_PER_TRADE
    stop_loss_pips: float = constants.DEFAULT_STOP_LOSS_PIPS
    take_profit_pips: float = constants.DEFAULT_TAKE_PROFIT_PIPS
    risk_reward_ratio: float = constants.DEFAULT_RISK_REWARD_RATIO
    strategy_type: StrategyType = StrategyType.FIXED_RR
    long_enabled: bool = True
    short_enabled: bool = True
    commission: float = 0.0  # Percent of balance per trade
    slippage: float = 0.0  # Spread in pips
    instrument: InstrumentType = InstrumentType.FOREX
    lot_size: LotSizeType = LotSizeType.STANDARD
    contract_size: float | None = None
    risk_model: RiskModel = RiskModel.COMPOUNDING
    tie_break: TieBreakPolicy = TieBreakPolicy.STOP_FIRST
    horizon_candles: int = constants.HORIZON_CANDLES
    cooldown_candles: int = constants.COOLDOWN_CANDLES
    structure_lookback: int = constants.STRUCTURE_LOOKBACK
    default_offset_pct: float = constants.DEFAULT_OFFSET_PCT

    def is_valid_balance(self) -> bool:
        """Validate initial balance is positive."""
        return self.initial_balance > 0

    def is_valid_risk(self) -> bool:
        """Validate risk per trade is a percentage in (0, 100]."""
        return 0 < self.risk_per_trade <= 100

    def is_valid_costs(self) -> bool:
        """Validate commission and slippage are non-negative."""
        return self.commission >= 0 and self.slippage >= 0

    def has_enabled_direction(self) -> bool:
        """At least one trade direction must be enabled."""
        return self.long_enabled or self.short_enabled

    def validate(self) -> "BacktestConfig":
        """Validate all fields.

        Returns:
            The config itself, for chaining

        Raises:
            ConfigurationError: Naming the first invalid field
        """
        if not self.is_valid_balance():
            raise ConfigurationError("initial_balance", f"must be positive, got {self.initial_balance}")
        if not self.is_valid_risk():
            raise ConfigurationError(
                "risk_per_trade", f"must be between 0 and 100, got {self.risk_per_trade}"
            )
        if self.strategy_type == StrategyType.FIXED_RR and self.stop_loss_pips <= 0:
            raise ConfigurationError("stop_loss_pips", f"must be positive, got {self.stop_loss_pips}")
        if self.strategy_type == StrategyType.FIXED_RR and self.take_profit_pips <= 0:
            raise ConfigurationError(
                "take_profit_pips", f"must be positive, got {self.take_profit_pips}"
            )
        if self.risk_reward_ratio <= 0:
            raise ConfigurationError(
                "risk_reward_ratio", f"must be positive, got {self.risk_reward_ratio}"
            )
        if self.commission < 0:
            raise ConfigurationError("commission", f"must be non-negative, got {self.commission}")
        if self.slippage < 0:
            raise ConfigurationError("slippage", f"must be non-negative, got {self.slippage}")
        if self.contract_size is not None and self.contract_size < 0:
            raise ConfigurationError(
                "contract_size", f"must be non-negative, got {self.contract_size}"
            )
        if self.horizon_candles < 1:
            raise ConfigurationError("horizon_candles", f"must be at least 1, got {self.horizon_candles}")
        if self.cooldown_candles < 0:
            raise ConfigurationError(
                "cooldown_candles", f"must be non-negative, got {self.cooldown_candles}"
            )
        if self.structure_lookback < 1:
            raise ConfigurationError(
                "structure_lookback", f"must be at least 1, got {self.structure_lookback}"
            )
        if not 0 < self.default_offset_pct < 100:
            raise ConfigurationError(
                "default_offset_pct", f"must be between 0 and 100, got {self.default_offset_pct}"
            )
        if not self.has_enabled_direction():
            raise ConfigurationError("long_enabled", "at least one direction must be enabled")
        return self

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "BacktestConfig":
        """Return a copy with per-strategy overrides applied.

        Raises:
            ConfigurationError: If an override names an unknown field
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(", ".join(sorted(unknown)), "unknown configuration option")

        values: dict[str, Any] = {}
        for name, value in overrides.items():
            parser = _ENUM_FIELDS.get(name)
            try:
                values[name] = parser(value) if parser is not None else value
            except ValueError as e:
                raise ConfigurationError(name, str(e)) from e
        return replace(self, **values)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if hasattr(value, "value") else value
        return result


@dataclass
class BacktestResult:
    """Results from a single-strategy simulation."""

    config: BacktestConfig
    trades: list[Trade]
    stats: EquityStats
    equity_curve: list[float]
    drawdown_curve: list[float]
    skipped_entries: int = 0
    status: str = "completed"
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_trades(self) -> int:
        return len(self.trades)

    @property
    def winning_trades(self) -> int:
        return sum(1 for t in self.trades if t.outcome.is_win)

    @property
    def losing_trades(self) -> int:
        return sum(1 for t in self.trades if t.outcome.is_loss)

    @property
    def win_rate(self) -> float:
        """Winning trades as a percentage of all resolved trades."""
        return self.stats.win_rate

    @property
    def profit_factor(self) -> float:
        return self.stats.profit_factor

    @property
    def net_profit(self) -> float:
        return self.stats.final_balance - self.config.initial_balance

    @property
    def final_balance(self) -> float:
        return self.equity_curve[-1]

    def performance_summary(self) -> dict[str, Any]:
        """Get a summary of key performance metrics."""
        return {
            "initial_balance": self.config.initial_balance,
            "final_balance": self.final_balance,
            "net_profit": self.net_profit,
            "total_trades": self.total_trades,
            "winning_trades": self.winning_trades,
            "losing_trades": self.losing_trades,
            "win_rate": self.win_rate,
            "profit_factor": self.profit_factor,
            "max_drawdown_percent": self.stats.max_drawdown_percent,
            "sharpe_ratio": self.stats.sharpe_ratio,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert results to dictionary."""
        return {
            "config": self.config.to_dict(),
            "status": self.status,
            "error_message": self.error_message,
            "skipped_entries": self.skipped_entries,
            "summary": self.performance_summary(),
            "stats": self.stats.to_dict(),
            "trades": [trade.to_dict() for trade in self.trades],
            "equity_curve": list(self.equity_curve),
            "drawdown_curve": list(self.drawdown_curve),
        }
