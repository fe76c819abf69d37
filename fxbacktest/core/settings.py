"""
Pydantic settings for externally supplied run options.

Maps the recognized option names (``initialBalance``, ``riskPerTrade``, ...)
onto BacktestConfig and BatchPolicy. Reading the options from a file is
left to the caller.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from fxbacktest.core import constants
from fxbacktest.core.enums import StrategyType
from fxbacktest.core.exceptions.backtest import ConfigurationError
from fxbacktest.core.models.backtest import BacktestConfig
from fxbacktest.core.models.batch import BatchPolicy, default_worker_count


class BacktestSettings(BaseModel):
    """Validated run options."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    initial_balance: float = Field(
        default=constants.DEFAULT_INITIAL_BALANCE, gt=0, alias="initialBalance"
    )
    risk_per_trade: float = Field(
        default=constants.DEFAULT_RISK_PER_TRADE, gt=0, le=100, alias="riskPerTrade"
    )
    stop_loss_pips: float = Field(default=constants.DEFAULT_STOP_LOSS_PIPS, gt=0, alias="stopLossPips")
    take_profit_pips: float = Field(
        default=constants.DEFAULT_TAKE_PROFIT_PIPS, gt=0, alias="takeProfitPips"
    )
    risk_reward_ratio: float = Field(
        default=constants.DEFAULT_RISK_REWARD_RATIO, gt=0, alias="riskRewardRatio"
    )
    strategy_type: StrategyType = Field(default=StrategyType.FIXED_RR, alias="strategyType")
    long_enabled: bool = Field(default=True, alias="longEnabled")
    short_enabled: bool = Field(default=True, alias="shortEnabled")
    commission: float = Field(default=0.0, ge=0)
    slippage: float = Field(default=0.0, ge=0)
    worker_count: int = Field(
        default_factory=default_worker_count,
        ge=1,
        le=constants.MAX_WORKER_COUNT,
        alias="workerCount",
    )
    batch_size: int = Field(
        default=constants.DEFAULT_BATCH_SIZE, ge=1, le=constants.MAX_BATCH_SIZE, alias="batchSize"
    )
    memory_limit_mb: float | None = Field(default=None, gt=0, alias="memoryLimitMB")

    @field_validator("strategy_type", mode="before")
    @classmethod
    def parse_strategy_type(cls, v: Any) -> StrategyType:
        """Accept 'FixedRR'-style names as well as enum values."""
        return StrategyType.parse(v)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "BacktestSettings":
        """Validate a raw option mapping.

        Raises:
            ConfigurationError: Naming the first invalid option
        """
        try:
            return cls.model_validate(dict(options))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "settings"
            raise ConfigurationError(field, first["msg"]) from e

    def to_config(self) -> BacktestConfig:
        return BacktestConfig(
            initial_balance=self.initial_balance,
            risk_per_trade=self.risk_per_trade,
            stop_loss_pips=self.stop_loss_pips,
            take_profit_pips=self.take_profit_pips,
            risk_reward_ratio=self.risk_reward_ratio,
            strategy_type=self.strategy_type,
            long_enabled=self.long_enabled,
            short_enabled=self.short_enabled,
            commission=self.commission,
            slippage=self.slippage,
        ).validate()

    def to_policy(self) -> BatchPolicy:
        return BatchPolicy(
            worker_count=self.worker_count,
            batch_size=self.batch_size,
            memory_limit_mb=self.memory_limit_mb,
        ).validate()


def load_settings(options: Mapping[str, Any]) -> tuple[BacktestConfig, BatchPolicy]:
    """Convert a raw option mapping into a run configuration and batch policy."""
    settings = BacktestSettings.from_mapping(options)
    return settings.to_config(), settings.to_policy()
