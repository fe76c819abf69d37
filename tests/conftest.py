"""
Shared fixtures for the test suite.
"""

from collections.abc import Callable, Sequence

import pandas as pd
import pytest

from fxbacktest.core.enums import Direction, TradeOutcome
from fxbacktest.core.models.candle import Candle
from fxbacktest.core.models.trade import Trade, TradeParameters, TradeResult

# (open, high, low, close) rows with strictly increasing closes; the long
# entry at candle 1 (close 1.1010, SL 1.1000, TP 1.1030) is hit on candle 4.
RISING_ROWS = [
    (1.0995, 1.1002, 1.0994, 1.1000),
    (1.1000, 1.1012, 1.0999, 1.1010),
    (1.1010, 1.1018, 1.1008, 1.1015),
    (1.1015, 1.1022, 1.1012, 1.1020),
    (1.1020, 1.1040, 1.1018, 1.1025),
]

# Mirror image for shorts: entry at candle 1 (close 1.0990, SL 1.1000, TP 1.0970).
FALLING_ROWS = [
    (1.1005, 1.1006, 1.0998, 1.1000),
    (1.1000, 1.1001, 1.0988, 1.0990),
    (1.0990, 1.0992, 1.0982, 1.0985),
    (1.0985, 1.0988, 1.0978, 1.0980),
    (1.0980, 1.0982, 1.0960, 1.0975),
]


def build_candles(rows: Sequence[tuple[float, float, float, float]]) -> list[Candle]:
    return [Candle(i, o, h, lo, c) for i, (o, h, lo, c) in enumerate(rows)]


def build_frame(rows: Sequence[tuple[float, float, float, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "timestamp": list(range(len(rows))),
            "open": [r[0] for r in rows],
            "high": [r[1] for r in rows],
            "low": [r[2] for r in rows],
            "close": [r[3] for r in rows],
            "volume": [100.0] * len(rows),
        }
    )


def staircase_rows(count: int, step: float = 0.0005) -> list[tuple[float, float, float, float]]:
    """Rising candles: each closes ``step`` above its open, one step above the last."""
    rows = []
    for k in range(count):
        open_ = 1.1000 + k * step
        close = open_ + step
        rows.append((open_, close + 0.0001, open_ - 0.0001, close))
    return rows


@pytest.fixture
def rising_candles() -> list[Candle]:
    """Five-candle long scenario."""
    return build_candles(RISING_ROWS)


@pytest.fixture
def falling_candles() -> list[Candle]:
    """Five-candle short scenario."""
    return build_candles(FALLING_ROWS)


@pytest.fixture
def rising_frame() -> pd.DataFrame:
    """Five-candle long scenario as a price frame."""
    return build_frame(RISING_ROWS)


@pytest.fixture
def trade_factory() -> Callable[..., Trade]:
    """Build resolved trades risking 100 to make 100 x ``rr``."""

    def _make(
        outcome: TradeOutcome,
        risk: float = 100.0,
        rr: float = 2.0,
        balance: float = 10000.0,
        index: int = 0,
    ) -> Trade:
        params = TradeParameters(
            account_balance=balance,
            risk_percent=risk / balance * 100.0,
            entry_price=1.1000,
            stop_loss_pips=10.0,
            take_profit_pips=10.0 * rr,
        )
        result = TradeResult(
            risk_amount=risk,
            reward_amount=risk * rr,
            position_size=1.0,
            exact_position_size=1.0,
            stop_loss_price=1.0990,
            take_profit_price=1.1000 + 0.001 * rr,
            risk_reward_ratio=rr,
            pip_value=10.0,
            stop_distance_pips=10.0,
            take_profit_pips=10.0 * rr,
        )
        trade = Trade(
            index=index,
            direction=Direction.LONG,
            entry_index=index,
            entry_timestamp=index,
            parameters=params,
            result=result,
            balance_before=balance,
        )
        if outcome != TradeOutcome.PENDING:
            trade.resolve(outcome, index + 1, index + 1, 1.1)
        return trade

    return _make


@pytest.fixture
def trade_sequence(trade_factory: Callable[..., Trade]) -> Callable[..., list[Trade]]:
    """Build a chain of trades whose balances follow one another."""

    def _make(outcomes: Sequence[TradeOutcome], risk: float = 100.0, rr: float = 2.0) -> list[Trade]:
        trades: list[Trade] = []
        balance = 10000.0
        for i, outcome in enumerate(outcomes):
            trade = trade_factory(outcome, risk=risk, rr=rr, balance=balance, index=i)
            trades.append(trade)
            balance = trade.balance_after
        return trades

    return _make
