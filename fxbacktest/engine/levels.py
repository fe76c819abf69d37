"""
Stop loss and take profit placement.

Turns a signal candle into TradeParameters according to the configured
strategy type.
"""

from collections.abc import Sequence

from fxbacktest.core.enums import Direction, StrategyType
from fxbacktest.core.models.backtest import BacktestConfig
from fxbacktest.core.models.candle import Candle
from fxbacktest.core.models.trade import TradeParameters


def structure_stop(candles: Sequence[Candle], index: int, direction: Direction, lookback: int) -> float:
    """Swing level over the ``lookback`` candles before ``index``.

    Seeded with the entry close; longs take the lowest low, shorts the
    highest high. The entry candle's own wick is not part of the window.
    """
    entry = candles[index].close
    window = candles[max(0, index - lookback) : index]
    if direction.is_long:
        return min([entry, *(c.low for c in window)])
    return max([entry, *(c.high for c in window)])


def build_trade_parameters(
    config: BacktestConfig,
    candles: Sequence[Candle],
    index: int,
    direction: Direction,
    account_balance: float,
    risk_percent: float,
) -> TradeParameters:
    """Sizing inputs for an entry at the close of ``candles[index]``."""
    entry = candles[index].close
    common = dict(
        account_balance=account_balance,
        risk_percent=risk_percent,
        entry_price=entry,
        instrument=config.instrument,
        lot_size=config.lot_size,
        contract_size=config.contract_size,
        direction=direction,
    )

    match config.strategy_type:
        case StrategyType.FIXED_RR:
            return TradeParameters(
                stop_loss_pips=config.stop_loss_pips,
                take_profit_pips=config.take_profit_pips,
                **common,
            )
        case StrategyType.STRUCTURE_BASED:
            return TradeParameters(
                stop_loss_price=structure_stop(candles, index, direction, config.structure_lookback),
                risk_reward_ratio=config.risk_reward_ratio,
                **common,
            )
        case _:
            # Same percentage of price on both sides
            distance = entry * config.default_offset_pct / 100.0
            return TradeParameters(
                stop_loss_price=entry - direction.sign * distance,
                take_profit_price=entry + direction.sign * distance,
                **common,
            )
