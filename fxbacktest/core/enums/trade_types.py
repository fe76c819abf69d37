"""
Trade direction and outcome enumerations.

This module defines the allowed trade directions and resolution outcomes.
"""

from enum import StrEnum


class Direction(StrEnum):
    """
    Allowed trade directions.

    Defines whether a trade profits from rising or falling prices.
    """

    LONG = "long"
    SHORT = "short"

    @property
    def is_long(self) -> bool:
        """Check if direction is long."""
        return self == Direction.LONG

    @property
    def sign(self) -> float:
        """+1 for long trades, -1 for short trades."""
        return 1.0 if self.is_long else -1.0

    def opposite(self) -> "Direction":
        """Get the opposite direction."""
        return Direction.SHORT if self.is_long else Direction.LONG  # type: ignore[return-value]


class TradeOutcome(StrEnum):
    """
    Resolution state of a simulated trade.

    A trade starts as PENDING and is resolved exactly once.
    """

    PENDING = "pending"
    LOSS_AT_SL = "loss_at_sl"
    WIN_AT_TP1 = "win_at_tp1"
    WIN_AT_TP2 = "win_at_tp2"
    BREAK_EVEN = "break_even"

    @property
    def is_win(self) -> bool:
        """Check if outcome is a win at either target."""
        return self in (TradeOutcome.WIN_AT_TP1, TradeOutcome.WIN_AT_TP2)

    @property
    def is_loss(self) -> bool:
        """Check if outcome is a stop loss."""
        return self == TradeOutcome.LOSS_AT_SL

    @property
    def is_resolved(self) -> bool:
        """Check if outcome is final."""
        return self != TradeOutcome.PENDING

    @property
    def label(self) -> str:
        """Human readable label used in reports."""
        labels = {
            TradeOutcome.PENDING: "Pending",
            TradeOutcome.LOSS_AT_SL: "Loss at SL",
            TradeOutcome.WIN_AT_TP1: "Win at TP1",
            TradeOutcome.WIN_AT_TP2: "Win at TP2",
            TradeOutcome.BREAK_EVEN: "Break Even",
        }
        return labels[self]
