"""
Single-strategy price-walk simulator.

Walks a candle series looking for entry signals, opens at most one
position at a time, resolves it against later candles and records the
result. A run owns all of its state, so independent runs can execute on
separate threads.
"""

from collections.abc import Sequence

import pandas as pd
from loguru import logger

from fxbacktest.core.enums import (
    Direction,
    RiskModel,
    SimulatorState,
    TieBreakPolicy,
    TradeOutcome,
)
from fxbacktest.core.exceptions.backtest import CalculationError, DataError, ValidationError
from fxbacktest.core.models.backtest import BacktestConfig, BacktestResult
from fxbacktest.core.models.batch import CandleData
from fxbacktest.core.models.candle import Candle
from fxbacktest.core.models.trade import Trade
from fxbacktest.core.utils.decorators import log_operation
from fxbacktest.infrastructure.data import CandleSeriesValidator, frame_to_candles

from .levels import build_trade_parameters
from .risk import RiskProfile, risk_percent_for, sizing_balance
from .sizing import TradeSizer
from .stats import StatsEngine


def as_candles(data: CandleData) -> list[Candle]:
    """Accept a price frame or a candle sequence."""
    if isinstance(data, pd.DataFrame):
        return frame_to_candles(data)
    return list(data)


class SingleRunSimulator:
    """Simulates one strategy configuration over one candle series.

    The simulator moves IDLE -> SCANNING -> (POSITIONED -> RESOLVING)* -> DONE.
    ``state`` is exposed for observability only.
    """

    def __init__(
        self,
        config: BacktestConfig,
        sizer: TradeSizer | None = None,
        stats_engine: StatsEngine | None = None,
        validator: CandleSeriesValidator | None = None,
    ) -> None:
        self.config = config.validate()
        self.sizer = sizer or TradeSizer(fee_percent=config.commission, spread_pips=config.slippage)
        self.stats_engine = stats_engine or StatsEngine()
        self.validator = validator or CandleSeriesValidator()
        self.state = SimulatorState.IDLE

    def run(self, data: CandleData) -> BacktestResult:
        """Run the simulation.

        Raises:
            DataError: If the candle series is empty, too short or unsorted
        """
        candles = as_candles(data)
        self.validator.validate(candles)

        config = self.config
        self.state = SimulatorState.SCANNING
        balance = config.initial_balance
        trades: list[Trade] = []
        skipped = 0
        discarded = 0

        last_signal = len(candles) - 2
        i = 1
        while i <= last_signal:
            direction = self.entry_signal(candles, i)
            if direction is None:
                i += 1
                continue
            if balance <= 0:
                logger.warning(f"Account depleted at candle {i}; stopping scan")
                break

            trade = self._open_trade(candles, i, direction, balance, trades)
            if trade is None:
                skipped += 1
                i += 1
                continue

            exit_index = self._resolve(trade, candles)
            if exit_index is None:
                # Series ended first; nothing left to scan
                logger.debug(f"Discarding pending {direction.value} trade opened at candle {i}")
                discarded += 1
                break

            trades.append(trade)
            balance = trade.balance_after
            logger.debug(
                f"Trade {trade.index} {direction.value} {trade.outcome.label} "
                f"at candle {exit_index}, balance {balance:.2f}"
            )
            self.state = SimulatorState.SCANNING
            i = max(exit_index + config.cooldown_candles, i + 1)

        self.state = SimulatorState.DONE

        equity_curve = self.stats_engine.generate_equity_curve(trades, config.initial_balance)
        return BacktestResult(
            config=config,
            trades=trades,
            stats=self.stats_engine.calculate_stats(trades, config.initial_balance),
            equity_curve=equity_curve,
            drawdown_curve=self.stats_engine.generate_drawdown_curve(equity_curve),
            skipped_entries=skipped,
            metadata={
                "candles": len(candles),
                "strategy_type": config.strategy_type.value,
                "discarded_pending": discarded,
            },
        )

    def entry_signal(self, candles: Sequence[Candle], i: int) -> Direction | None:
        """Direction signalled by candle ``i``, if that direction is enabled.

        Long when the candle closes above both the previous close and its
        own open; short on the mirror condition.
        """
        current, previous = candles[i], candles[i - 1]
        if current.close > previous.close and current.close > current.open:
            return Direction.LONG if self.config.long_enabled else None
        if current.close < previous.close and current.close < current.open:
            return Direction.SHORT if self.config.short_enabled else None
        return None

    def _risk_percent(self, trades: Sequence[Trade]) -> float:
        config = self.config
        if config.risk_model != RiskModel.KELLY_CRITERION:
            return config.risk_per_trade
        profile = RiskProfile("configured", config.risk_per_trade, config.risk_model)
        win_rate = sum(1 for t in trades if t.outcome.is_win) / len(trades) if trades else 0.0
        return risk_percent_for(profile, win_rate, config.risk_reward_ratio)

    def _open_trade(
        self,
        candles: Sequence[Candle],
        i: int,
        direction: Direction,
        balance: float,
        trades: Sequence[Trade],
    ) -> Trade | None:
        """Size an entry at candle ``i``; None when sizing rejects it."""
        config = self.config
        params = build_trade_parameters(
            config,
            candles,
            i,
            direction,
            account_balance=sizing_balance(config.risk_model, config.initial_balance, balance),
            risk_percent=self._risk_percent(trades),
        )
        sized = self.sizer.size(params)
        if isinstance(sized, ValidationError | CalculationError):
            logger.warning(f"Skipping {direction.value} entry at candle {i}: {sized}")
            return None

        self.state = SimulatorState.POSITIONED
        return Trade(
            index=len(trades),
            direction=direction,
            entry_index=i,
            entry_timestamp=candles[i].timestamp,
            parameters=params,
            result=sized,
            balance_before=balance,
        )

    def _resolve(self, trade: Trade, candles: Sequence[Candle]) -> int | None:
        """Walk forward from the candle after entry until the trade closes.

        Returns:
            Index of the exit candle, or None if the series ends first
        """
        self.state = SimulatorState.RESOLVING
        horizon_index = trade.entry_index + self.config.horizon_candles
        last_index = min(horizon_index, len(candles) - 1)

        for j in range(trade.entry_index + 1, last_index + 1):
            candle = candles[j]
            hit = self._check_levels(trade, candle)
            if hit is not None:
                outcome, price = hit
                trade.resolve(outcome, j, candle.timestamp, price)
                return j
            if j == horizon_index:
                trade.resolve(
                    self._classify_move(trade, candle.close),
                    j,
                    candle.timestamp,
                    candle.close,
                    forced_close=True,
                )
                return j
        return None

    def _check_levels(self, trade: Trade, candle: Candle) -> tuple[TradeOutcome, float] | None:
        """Outcome and exit price if the candle touches the stop or target."""
        stop = trade.result.stop_loss_price
        target = trade.result.take_profit_price
        if trade.direction.is_long:
            stop_hit = candle.low <= stop
            target_hit = candle.high >= target
        else:
            stop_hit = candle.high >= stop
            target_hit = candle.low <= target

        if stop_hit and target_hit:
            if self.config.tie_break == TieBreakPolicy.TARGET_FIRST:
                return TradeOutcome.WIN_AT_TP1, target
            return TradeOutcome.LOSS_AT_SL, stop
        if stop_hit:
            return TradeOutcome.LOSS_AT_SL, stop
        if target_hit:
            return TradeOutcome.WIN_AT_TP1, target
        return None

    @staticmethod
    def _classify_move(trade: Trade, exit_price: float) -> TradeOutcome:
        move = (exit_price - trade.entry_price) * trade.direction.sign
        if move > 0:
            return TradeOutcome.WIN_AT_TP1
        if move < 0:
            return TradeOutcome.LOSS_AT_SL
        return TradeOutcome.BREAK_EVEN


@log_operation
def run_single(config: BacktestConfig, candles: CandleData) -> BacktestResult | DataError:
    """Simulate one configuration, returning a DataError for unusable data."""
    try:
        return SingleRunSimulator(config).run(candles)
    except DataError as e:
        logger.warning(f"Simulation aborted: {e}")
        return e
