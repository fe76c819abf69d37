"""
Trade domain models.
Optimized for high-performance backtesting with float operations.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from fxbacktest.core.enums import (
    Direction,
    InstrumentType,
    LotSizeType,
    PriceInputType,
    TradeOutcome,
)
from fxbacktest.core.exceptions.backtest import OutcomeAlreadySetError, ValidationError
from fxbacktest.core.types.financial import round_amount, round_price


@dataclass(frozen=True)
class TradeParameters:
    """Inputs required to size one trade.

    The stop loss is given either in pips or as an explicit price. The take
    profit is given in pips, as a price, or derived from ``risk_reward_ratio``.
    """

    account_balance: float
    risk_percent: float
    entry_price: float
    stop_loss_pips: float | None = None
    stop_loss_price: float | None = None
    take_profit_pips: float | None = None
    take_profit_price: float | None = None
    risk_reward_ratio: float | None = None
    instrument: InstrumentType = InstrumentType.FOREX
    lot_size: LotSizeType = LotSizeType.STANDARD
    contract_size: float | None = None
    direction: Direction = Direction.LONG
    tp1_percent: float | None = None
    tp2_percent: float | None = None

    @property
    def is_stop_loss_price_override(self) -> bool:
        """True when the stop was supplied as an explicit price."""
        return self.stop_loss_price is not None

    @property
    def has_split(self) -> bool:
        """True when both take profit legs are configured."""
        return self.tp1_percent is not None and self.tp2_percent is not None

    def with_stop_loss(self, value: float, input_type: PriceInputType) -> "TradeParameters":
        """Return a copy with the stop loss replaced."""
        if input_type == PriceInputType.PIPS:
            return replace(self, stop_loss_pips=value, stop_loss_price=None)
        return replace(self, stop_loss_price=value, stop_loss_pips=None)

    def with_take_profit(self, value: float, input_type: PriceInputType) -> "TradeParameters":
        """Return a copy with the take profit replaced."""
        if input_type == PriceInputType.PIPS:
            return replace(self, take_profit_pips=value, take_profit_price=None)
        return replace(self, take_profit_price=value, take_profit_pips=None)

    def with_split(self, tp1_percent: float, tp2_percent: float) -> "TradeParameters":
        """Return a copy with a two-leg take profit split."""
        return replace(self, tp1_percent=tp1_percent, tp2_percent=tp2_percent)


@dataclass(frozen=True)
class TradeResult:
    """Sized trade produced by the trade sizer."""

    risk_amount: float
    reward_amount: float
    position_size: float  # Lots, rounded to lot precision
    exact_position_size: float  # Unrounded lots
    stop_loss_price: float
    take_profit_price: float
    risk_reward_ratio: float
    pip_value: float
    stop_distance_pips: float
    take_profit_pips: float
    break_even_price: float | None = None
    break_even_pips: float | None = None
    tp1_price: float | None = None
    tp2_price: float | None = None
    tp1_amount: float | None = None
    tp2_amount: float | None = None

    @property
    def has_break_even_info(self) -> bool:
        """True when fee or spread costs were modelled."""
        return self.break_even_price is not None

    @property
    def has_multiple_targets(self) -> bool:
        """True when the result carries two take profit legs."""
        return self.tp1_price is not None and self.tp2_price is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "risk_amount": round_amount(self.risk_amount),
            "reward_amount": round_amount(self.reward_amount),
            "position_size": self.position_size,
            "stop_loss_price": round_price(self.stop_loss_price),
            "take_profit_price": round_price(self.take_profit_price),
            "risk_reward_ratio": self.risk_reward_ratio,
            "pip_value": self.pip_value,
            "break_even_price": self.break_even_price,
            "break_even_pips": self.break_even_pips,
            "tp1_price": self.tp1_price,
            "tp2_price": self.tp2_price,
            "tp1_amount": self.tp1_amount,
            "tp2_amount": self.tp2_amount,
        }


@dataclass
class Trade:
    """A simulated trade.

    Trades are plain records owned by the run that produced them and are
    addressed by ``index`` within that run's trade list. The outcome starts
    as PENDING and may be resolved exactly once.
    """

    index: int
    direction: Direction
    entry_index: int
    entry_timestamp: object
    parameters: TradeParameters
    result: TradeResult
    balance_before: float
    outcome: TradeOutcome = TradeOutcome.PENDING
    exit_index: int | None = None
    exit_timestamp: object = None
    exit_price: float | None = None
    forced_close: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.balance_before <= 0:
            raise ValidationError(f"Balance must be positive, got {self.balance_before}")
        if self.entry_index < 0:
            raise ValidationError(f"Entry index must be non-negative, got {self.entry_index}")

    @property
    def entry_price(self) -> float:
        """Entry price taken from the sizing parameters."""
        return self.parameters.entry_price

    def resolve(
        self,
        outcome: TradeOutcome,
        exit_index: int,
        exit_timestamp: object,
        exit_price: float,
        forced_close: bool = False,
    ) -> None:
        """Set the final outcome.

        Raises:
            ValidationError: If ``outcome`` is PENDING
            OutcomeAlreadySetError: If the trade was already resolved
        """
        if self.outcome.is_resolved:
            raise OutcomeAlreadySetError(self.index, self.outcome.value)
        if not outcome.is_resolved:
            raise ValidationError("A trade cannot be resolved as pending")
        self.outcome = outcome
        self.exit_index = exit_index
        self.exit_timestamp = exit_timestamp
        self.exit_price = exit_price
        self.forced_close = forced_close

    @property
    def pnl(self) -> float:
        """Realized profit or loss of the trade."""
        if self.outcome.is_loss:
            return -self.result.risk_amount
        if self.outcome.is_win:
            if self.result.has_multiple_targets:
                if self.outcome == TradeOutcome.WIN_AT_TP1:
                    return self.result.tp1_amount  # type: ignore[return-value]
                return self.result.tp2_amount  # type: ignore[return-value]
            return self.result.reward_amount
        return 0.0

    @property
    def balance_after(self) -> float:
        """Account balance once this trade is closed."""
        return self.balance_before + self.pnl

    @property
    def r_multiple(self) -> float:
        """Outcome in units of risk: +RR for a win, -1 for a loss, 0 otherwise."""
        if self.outcome.is_win:
            return self.result.risk_reward_ratio
        if self.outcome.is_loss:
            return -1.0
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert trade to dictionary."""
        return {
            "index": self.index,
            "direction": self.direction.value,
            "entry_index": self.entry_index,
            "entry_timestamp": str(self.entry_timestamp),
            "entry_price": self.entry_price,
            "exit_index": self.exit_index,
            "exit_timestamp": None if self.exit_timestamp is None else str(self.exit_timestamp),
            "exit_price": self.exit_price,
            "outcome": self.outcome.value,
            "forced_close": self.forced_close,
            "pnl": round_amount(self.pnl),
            "balance_before": round_amount(self.balance_before),
            "balance_after": round_amount(self.balance_after),
            **self.result.to_dict(),
        }
