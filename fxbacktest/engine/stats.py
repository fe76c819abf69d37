"""
Equity and risk statistics.

All statistics are derived from a list of resolved trades and an initial
balance; nothing here holds state between calls.
"""

import math
from collections.abc import Sequence

import numpy as np

from fxbacktest.core import constants
from fxbacktest.core.models.stats import EquityStats
from fxbacktest.core.models.trade import Trade
from fxbacktest.core.types.financial import ZERO


def annualized_sharpe(
    equity_curve: Sequence[float], periods_per_year: int = constants.TRADING_DAYS_PER_YEAR
) -> float:
    """Sharpe ratio of per-step returns with a zero risk-free rate.

    Uses the population standard deviation. Returns 0.0 when the curve has
    fewer than two points or the returns have no dispersion.
    """
    if len(equity_curve) < 2:
        return 0.0
    curve = np.asarray(equity_curve, dtype=float)
    previous = curve[:-1]
    if np.any(previous <= 0):
        return 0.0
    returns = np.diff(curve) / previous
    std = float(np.std(returns))
    if std == 0.0:
        return 0.0
    return float(np.mean(returns)) / std * math.sqrt(periods_per_year)


def drawdown_curve(equity_curve: Sequence[float]) -> list[float]:
    """Percentage drawdown from the running peak at every curve point."""
    result: list[float] = []
    peak = equity_curve[0] if equity_curve else ZERO
    for balance in equity_curve:
        peak = max(peak, balance)
        result.append((peak - balance) / peak * 100.0 if peak > 0 else 0.0)
    return result


def max_drawdown(equity_curve: Sequence[float]) -> tuple[float, float, int]:
    """Return (max absolute drawdown, its percent, longest drawdown duration).

    The percent is taken at the point where the absolute drawdown peaks.
    Duration counts consecutive points since the last strictly new peak
    (a point equal to the peak extends it) and is tracked independently
    of the drawdown depth.
    """
    if not equity_curve:
        return 0.0, 0.0, 0

    peak = equity_curve[0]
    max_dd = max_dd_percent = 0.0
    duration = longest = 0
    for balance in equity_curve[1:]:
        if balance > peak:
            peak = balance
            duration = 0
            continue
        duration += 1
        longest = max(longest, duration)
        dd = peak - balance
        if dd > max_dd:
            max_dd = dd
            max_dd_percent = dd / peak * 100.0 if peak > 0 else 0.0
    return max_dd, max_dd_percent, longest


class StatsEngine:
    """Computes EquityStats from a trade sequence."""

    @staticmethod
    def generate_equity_curve(trades: Sequence[Trade], initial_balance: float) -> list[float]:
        """Running balance after each trade, prefixed with the initial balance.

        Order preserving: entry k+1 is the balance after ``trades[k]``.
        """
        curve = [initial_balance]
        balance = initial_balance
        for trade in trades:
            balance += trade.pnl
            curve.append(balance)
        return curve

    @staticmethod
    def generate_drawdown_curve(equity_curve: Sequence[float]) -> list[float]:
        return drawdown_curve(equity_curve)

    def calculate_stats(self, trades: Sequence[Trade], initial_balance: float) -> EquityStats:
        """Compute every statistic for ``trades`` starting at ``initial_balance``."""
        curve = self.generate_equity_curve(trades, initial_balance)
        final_balance = curve[-1]
        total_pnl = final_balance - initial_balance
        total = len(trades)

        wins = [t for t in trades if t.outcome.is_win]
        losses = [t for t in trades if t.outcome.is_loss]
        break_even = total - len(wins) - len(losses)

        gross_profit = sum(t.pnl for t in wins)
        gross_loss = sum(-t.pnl for t in losses)

        dd, dd_percent, dd_duration = max_drawdown(curve)
        longest_win, longest_loss, current = self._streaks(trades)

        total_r = sum(t.r_multiple for t in trades)
        avg_r = total_r / total if total else 0.0

        return EquityStats(
            initial_balance=initial_balance,
            final_balance=final_balance,
            total_pnl=total_pnl,
            percent_gain=total_pnl / initial_balance * 100.0 if initial_balance > 0 else 0.0,
            win_rate=len(wins) / total * 100.0 if total else 0.0,
            total_trades=total,
            winning_trades=len(wins),
            losing_trades=len(losses),
            break_even_trades=break_even,
            max_drawdown=dd,
            max_drawdown_percent=dd_percent,
            drawdown_duration=dd_duration,
            sharpe_ratio=annualized_sharpe(curve),
            profit_factor=gross_profit / gross_loss if gross_loss > 0 else 0.0,
            longest_win_streak=longest_win,
            longest_lose_streak=longest_loss,
            current_streak=current,
            avg_win=gross_profit / len(wins) if wins else 0.0,
            avg_loss=gross_loss / len(losses) if losses else 0.0,
            largest_win=max((t.pnl for t in wins), default=0.0),
            largest_loss=max((-t.pnl for t in losses), default=0.0),
            avg_r_multiple=avg_r,
            expectancy=avg_r,
        )

    @staticmethod
    def _streaks(trades: Sequence[Trade]) -> tuple[int, int, int]:
        """Return (longest win streak, longest loss streak, signed current streak).

        A break-even trade ends both kinds of streak.
        """
        longest_win = longest_loss = 0
        win_run = loss_run = 0
        for trade in trades:
            if trade.outcome.is_win:
                win_run += 1
                loss_run = 0
            elif trade.outcome.is_loss:
                loss_run += 1
                win_run = 0
            else:
                win_run = loss_run = 0
            longest_win = max(longest_win, win_run)
            longest_loss = max(longest_loss, loss_run)
        current = win_run if win_run else -loss_run
        return longest_win, longest_loss, current
