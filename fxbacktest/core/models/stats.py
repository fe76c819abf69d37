"""
Equity statistics model.

EquityStats is derived data: it is recomputed from a trade list and an
initial balance whenever requested and never persisted by the core.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class EquityStats:
    """Aggregate performance metrics for one trade sequence."""

    # Basic stats
    initial_balance: float = 0.0
    final_balance: float = 0.0
    total_pnl: float = 0.0
    percent_gain: float = 0.0
    win_rate: float = 0.0  # Percent of all trades
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    break_even_trades: int = 0

    # Risk metrics
    max_drawdown: float = 0.0
    max_drawdown_percent: float = 0.0
    drawdown_duration: int = 0
    sharpe_ratio: float = 0.0
    profit_factor: float = 0.0

    # Streaks
    longest_win_streak: int = 0
    longest_lose_streak: int = 0
    current_streak: int = 0  # +n wins, -n losses, 0 otherwise

    # Trade metrics
    avg_win: float = 0.0
    avg_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0

    # R-multiples
    avg_r_multiple: float = 0.0
    expectancy: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary."""
        return asdict(self)

    def report(self) -> str:
        """Render a plain-text statistics report."""
        if self.current_streak > 0:
            streak = f"{self.current_streak} wins"
        elif self.current_streak < 0:
            streak = f"{-self.current_streak} losses"
        else:
            streak = "none"

        lines = [
            "=== EQUITY STATISTICS ===",
            "",
            "Basic Performance:",
            f"  Initial Balance: ${self.initial_balance:,.2f}",
            f"  Final Balance:   ${self.final_balance:,.2f}",
            f"  Total P&L:       ${self.total_pnl:,.2f} ({self.percent_gain:.2f}%)",
            f"  Win Rate:        {self.win_rate:.2f}%",
            f"  Total Trades:    {self.total_trades}",
            "",
            "Risk Metrics:",
            f"  Max Drawdown:    ${self.max_drawdown:,.2f} ({self.max_drawdown_percent:.2f}%)",
            f"  Drawdown Length: {self.drawdown_duration} trades",
            f"  Sharpe Ratio:    {self.sharpe_ratio:.3f}",
            f"  Profit Factor:   {self.profit_factor:.3f}",
            "",
            "Trade Streaks:",
            f"  Longest Win Streak:  {self.longest_win_streak} trades",
            f"  Longest Loss Streak: {self.longest_lose_streak} trades",
            f"  Current Streak:      {streak}",
            "",
            "Trade Statistics:",
            f"  Average Win:     ${self.avg_win:,.2f}",
            f"  Average Loss:    ${self.avg_loss:,.2f}",
            f"  Largest Win:     ${self.largest_win:,.2f}",
            f"  Largest Loss:    ${self.largest_loss:,.2f}",
            f"  Expectancy:      {self.expectancy:.3f}R",
        ]
        return "\n".join(lines)
