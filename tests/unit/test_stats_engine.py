"""
Unit tests for the statistics engine.
"""

import math
import statistics

import pytest

from fxbacktest.core.enums import TradeOutcome
from fxbacktest.engine.stats import StatsEngine, annualized_sharpe, drawdown_curve, max_drawdown

W = TradeOutcome.WIN_AT_TP1
L = TradeOutcome.LOSS_AT_SL
BE = TradeOutcome.BREAK_EVEN


@pytest.fixture
def engine() -> StatsEngine:
    return StatsEngine()


class TestEquityCurve:
    """Tests for equity and drawdown curves."""

    def test_should_anchor_curve_at_initial_balance(self, engine: StatsEngine, trade_sequence) -> None:
        """Test curve has one point per trade after the initial balance, in order."""
        curve = engine.generate_equity_curve(trade_sequence([L, W]), 10000.0)

        assert curve == pytest.approx([10000.0, 9900.0, 10100.0])

    def test_should_return_single_point_without_trades(self, engine: StatsEngine) -> None:
        """Test empty trade list yields only the initial balance."""
        assert engine.generate_equity_curve([], 5000.0) == [5000.0]

    def test_should_compute_drawdown_percentages(self) -> None:
        """Test drawdown curve is measured from the running peak."""
        curve = drawdown_curve([100.0, 120.0, 90.0, 130.0])

        assert curve == pytest.approx([0.0, 0.0, 25.0, 0.0])


class TestMaxDrawdown:
    """Tests for drawdown depth and duration."""

    def test_should_be_zero_for_non_decreasing_curve(self) -> None:
        """Test a curve that never falls has no drawdown depth."""
        dd, dd_percent, _ = max_drawdown([100.0, 100.0, 110.0, 120.0])
        assert (dd, dd_percent) == (0.0, 0.0)
        assert max_drawdown([100.0, 110.0, 120.0]) == (0.0, 0.0, 0)

    def test_should_reset_duration_only_on_new_peak(self) -> None:
        """Test a point equal to the peak extends the drawdown duration."""
        _, _, duration = max_drawdown([100.0, 120.0, 110.0, 120.0, 120.0, 130.0])
        assert duration == 3

    @pytest.mark.parametrize(
        "curve",
        [
            [100.0, 80.0, 200.0, 170.0, 160.0],
            [100.0, 99.0, 98.0, 97.0, 101.0, 50.0, 120.0],
            [10000.0, 9900.0, 10100.0, 9800.0, 9800.0, 10300.0, 9500.0],
            [500.0, 400.0, 300.0, 200.0, 100.0],
            [100.0, 150.0, 150.0, 149.0, 200.0, 10.0],
        ],
    )
    def test_should_not_exceed_peak_to_trough_range(self, curve: list[float]) -> None:
        """Test max drawdown is bounded by max(peak) - min(balance)."""
        dd, dd_percent, _ = max_drawdown(curve)

        assert 0.0 <= dd <= max(curve) - min(curve)
        assert 0.0 <= dd_percent <= 100.0

    def test_should_take_percent_at_deepest_absolute_point(self) -> None:
        """Test percent belongs to the largest absolute drawdown."""
        dd, dd_percent, duration = max_drawdown([100.0, 80.0, 200.0, 170.0, 160.0])

        assert dd == pytest.approx(40.0)
        assert dd_percent == pytest.approx(20.0)
        assert duration == 2

    def test_should_track_duration_independently(self) -> None:
        """Test the longest drawdown need not be the deepest."""
        _, _, duration = max_drawdown([100.0, 99.0, 98.0, 97.0, 101.0, 50.0, 120.0])
        assert duration == 3


class TestSharpe:
    """Tests for the Sharpe ratio."""

    def test_should_use_population_stdev(self) -> None:
        """Test Sharpe matches mean / pstdev x sqrt(252)."""
        curve = [10000.0, 10200.0, 10100.0, 10300.0]
        returns = [(b - a) / a for a, b in zip(curve, curve[1:], strict=False)]
        expected = statistics.mean(returns) / statistics.pstdev(returns) * math.sqrt(252)

        assert annualized_sharpe(curve) == pytest.approx(expected)

    def test_should_be_zero_without_dispersion(self) -> None:
        """Test constant returns give zero Sharpe."""
        assert annualized_sharpe([100.0, 100.0, 100.0]) == 0.0

    def test_should_be_zero_for_short_curve(self) -> None:
        """Test a single point gives zero Sharpe."""
        assert annualized_sharpe([100.0]) == 0.0


class TestCalculateStats:
    """Test suite for StatsEngine.calculate_stats."""

    def test_should_compute_mixed_sequence(self, engine: StatsEngine, trade_sequence) -> None:
        """Test win, win, loss statistics."""
        stats = engine.calculate_stats(trade_sequence([W, W, L]), 10000.0)

        assert stats.final_balance == pytest.approx(10300.0)
        assert stats.total_pnl == pytest.approx(300.0)
        assert stats.percent_gain == pytest.approx(3.0)
        assert stats.win_rate == pytest.approx(200.0 / 3.0)
        assert stats.total_trades == 3
        assert stats.winning_trades == 2
        assert stats.losing_trades == 1
        assert stats.profit_factor == pytest.approx(4.0)
        assert stats.max_drawdown == pytest.approx(100.0)
        assert stats.max_drawdown_percent == pytest.approx(100.0 / 10400.0 * 100.0)
        assert stats.drawdown_duration == 1
        assert stats.longest_win_streak == 2
        assert stats.longest_lose_streak == 1
        assert stats.current_streak == -1
        assert stats.avg_win == pytest.approx(200.0)
        assert stats.avg_loss == pytest.approx(100.0)
        assert stats.largest_win == pytest.approx(200.0)
        assert stats.largest_loss == pytest.approx(100.0)
        assert stats.expectancy == pytest.approx(1.0)

    def test_should_report_zero_profit_factor_without_losses(
        self, engine: StatsEngine, trade_sequence
    ) -> None:
        """Test profit factor is zero when there are no losing trades."""
        stats = engine.calculate_stats(trade_sequence([W, W]), 10000.0)

        assert stats.profit_factor == 0.0
        assert stats.max_drawdown == 0.0
        assert stats.current_streak == 2

    def test_should_reset_streak_on_break_even(self, engine: StatsEngine, trade_sequence) -> None:
        """Test a break-even trade ends the current streak."""
        stats = engine.calculate_stats(trade_sequence([L, L, BE]), 10000.0)

        assert stats.longest_lose_streak == 2
        assert stats.current_streak == 0
        assert stats.break_even_trades == 1

    def test_should_divide_expectancy_by_all_trades(self, engine: StatsEngine, trade_sequence) -> None:
        """Test break-even trades count toward the expectancy denominator."""
        stats = engine.calculate_stats(trade_sequence([W, L, BE, BE]), 10000.0)

        assert stats.expectancy == pytest.approx((2.0 - 1.0) / 4)
        assert stats.avg_r_multiple == stats.expectancy

    def test_should_handle_empty_trade_list(self, engine: StatsEngine) -> None:
        """Test statistics of an empty run."""
        stats = engine.calculate_stats([], 10000.0)

        assert stats.final_balance == 10000.0
        assert stats.win_rate == 0.0
        assert stats.sharpe_ratio == 0.0
        assert stats.expectancy == 0.0

    def test_should_render_report(self, engine: StatsEngine, trade_sequence) -> None:
        """Test text report contains the headline figures."""
        report = engine.calculate_stats(trade_sequence([W, L]), 10000.0).report()

        assert "=== EQUITY STATISTICS ===" in report
        assert "Final Balance:   $10,100.00" in report
        assert "Current Streak:      1 losses" in report
