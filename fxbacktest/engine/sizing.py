"""
Trade sizing: risk amount, position size and concrete stop/target levels.

Pure math, no I/O. Pip values for the finite instrument x lot size domain
are precomputed once at import into a read-only table, so sizing can run
from any number of worker threads without locking.

Formula::

    risk_amount   = balance x (risk_percent / 100)
    position_size = risk_amount / (pip_value x stop_distance_pips)
    reward_amount = risk_amount x risk_reward_ratio
"""

from collections.abc import Mapping
from types import MappingProxyType

from fxbacktest.core import constants
from fxbacktest.core.enums import Direction, InstrumentType, LotSizeType
from fxbacktest.core.exceptions.backtest import CalculationError, ValidationError
from fxbacktest.core.models.trade import TradeParameters, TradeResult
from fxbacktest.core.types.financial import (
    ZERO,
    percent_of,
    round_lots,
    safe_divide,
)
from fxbacktest.core.utils.validation import (
    validate_enum,
    validate_non_negative,
    validate_percentage,
    validate_positive,
    validate_split,
)

# Money per pip per contract unit
_PIP_VALUE_FACTORS = {
    InstrumentType.FOREX: 0.0001,
    InstrumentType.GOLD: 0.1 / 100,  # Quoted per ounce
    InstrumentType.INDICES: 1.0 / 100,  # Quoted in points
}


def pip_value_for_contract(instrument: InstrumentType, contract_size: float) -> float:
    """Value of one pip for one lot of ``contract_size`` units."""
    return _PIP_VALUE_FACTORS[instrument] * contract_size


def _build_pip_value_table() -> Mapping[tuple[InstrumentType, LotSizeType], float]:
    table = {
        (instrument, lot_size): pip_value_for_contract(instrument, lot_size.contract_size)
        for instrument in InstrumentType
        for lot_size in LotSizeType
    }
    return MappingProxyType(table)


PIP_VALUE_TABLE = _build_pip_value_table()


def lookup_pip_value(
    instrument: InstrumentType,
    lot_size: LotSizeType,
    contract_size: float | None = None,
) -> float:
    """Pip value for an instrument and lot size.

    A positive ``contract_size`` overrides the lot type's standard size.
    """
    if contract_size:
        return pip_value_for_contract(instrument, contract_size)
    return PIP_VALUE_TABLE[(instrument, lot_size)]


class TradeSizer:
    """Converts TradeParameters into a sized TradeResult.

    Args:
        fee_percent: Round-trip fee as a percent of account balance.
        spread_pips: Fixed spread in pips.

    When either cost is non-zero, results carry break-even information.
    """

    def __init__(self, fee_percent: float = 0.0, spread_pips: float = 0.0) -> None:
        validate_non_negative(fee_percent, "fee_percent")
        validate_non_negative(spread_pips, "spread_pips")
        self._fee_percent = fee_percent
        self._spread_pips = spread_pips

    @property
    def fee_percent(self) -> float:
        return self._fee_percent

    @property
    def spread_pips(self) -> float:
        return self._spread_pips

    def size(self, params: TradeParameters) -> TradeResult | ValidationError | CalculationError:
        """Size a trade, returning the error instead of raising it.

        No partial TradeResult is ever produced: callers get either a
        complete result or the reason sizing was rejected.
        """
        try:
            return self.size_or_raise(params)
        except (ValidationError, CalculationError) as e:
            return e

    def size_with_targets(
        self,
        params: TradeParameters,
        tp1_percent: float = constants.DEFAULT_TP1_PERCENT,
        tp2_percent: float = constants.DEFAULT_TP2_PERCENT,
    ) -> TradeResult | ValidationError | CalculationError:
        """Size a trade whose take profit is split into two legs (60/40 by default)."""
        return self.size(params.with_split(tp1_percent, tp2_percent))

    def size_or_raise(self, params: TradeParameters) -> TradeResult:
        """Size a trade.

        Raises:
            ValidationError: If parameters are malformed
            CalculationError: If the stop distance or pip value is zero
        """
        self._validate(params)

        instrument = params.instrument
        sign = params.direction.sign
        entry = params.entry_price

        pip_value = lookup_pip_value(instrument, params.lot_size, params.contract_size)
        if pip_value == ZERO:
            raise CalculationError("Pip value is zero; cannot size position")

        risk_amount = percent_of(params.account_balance, params.risk_percent)

        if params.is_stop_loss_price_override:
            stop_loss_price = params.stop_loss_price
            stop_pips = instrument.to_pips(entry - stop_loss_price)  # type: ignore[operator]
        else:
            stop_pips = params.stop_loss_pips
            stop_loss_price = entry - sign * instrument.to_price(stop_pips)  # type: ignore[arg-type]
        if stop_pips == ZERO:
            raise CalculationError("Stop distance is zero; cannot size position")

        exact_position_size = safe_divide(
            risk_amount, pip_value * stop_pips, "position sizing"  # type: ignore[operator]
        )

        take_profit_price, take_profit_pips, risk_reward_ratio = self._resolve_target(
            params, stop_pips  # type: ignore[arg-type]
        )

        break_even_price = break_even_pips = None
        if self._fee_percent > 0 or self._spread_pips > 0:
            break_even_pips = self._break_even_pips(params.account_balance, pip_value)
            break_even_price = entry + sign * instrument.to_price(break_even_pips)

        tp1_price = tp2_price = tp1_amount = tp2_amount = None
        if params.has_split:
            tp1_pips = take_profit_pips * (params.tp1_percent / 100.0)  # type: ignore[operator]
            tp2_pips = take_profit_pips * (params.tp2_percent / 100.0)  # type: ignore[operator]
            tp1_price = entry + sign * instrument.to_price(tp1_pips)
            tp2_price = entry + sign * instrument.to_price(tp2_pips)
            tp1_amount = risk_amount * (tp1_pips / stop_pips)  # type: ignore[operator]
            tp2_amount = risk_amount * (tp2_pips / stop_pips)  # type: ignore[operator]

        return TradeResult(
            risk_amount=risk_amount,
            reward_amount=risk_amount * risk_reward_ratio,
            position_size=round_lots(exact_position_size),
            exact_position_size=exact_position_size,
            stop_loss_price=stop_loss_price,  # type: ignore[arg-type]
            take_profit_price=take_profit_price,
            risk_reward_ratio=risk_reward_ratio,
            pip_value=pip_value,
            stop_distance_pips=stop_pips,  # type: ignore[arg-type]
            take_profit_pips=take_profit_pips,
            break_even_price=break_even_price,
            break_even_pips=break_even_pips,
            tp1_price=tp1_price,
            tp2_price=tp2_price,
            tp1_amount=tp1_amount,
            tp2_amount=tp2_amount,
        )

    def _resolve_target(
        self, params: TradeParameters, stop_pips: float
    ) -> tuple[float, float, float]:
        """Return (take_profit_price, take_profit_pips, risk_reward_ratio).

        An explicit target level (price or pips) wins and the ratio is
        derived from the two distances; otherwise the target is derived
        from the ratio.
        """
        instrument = params.instrument
        sign = params.direction.sign
        entry = params.entry_price

        if params.take_profit_price is not None:
            tp_price = params.take_profit_price
            tp_pips = instrument.to_pips(tp_price - entry)
        elif params.take_profit_pips is not None:
            tp_pips = params.take_profit_pips
            tp_price = entry + sign * instrument.to_price(tp_pips)
        else:
            rr = params.risk_reward_ratio
            tp_pips = stop_pips * rr  # type: ignore[operator]
            return entry + sign * instrument.to_price(tp_pips), tp_pips, rr  # type: ignore[return-value]

        return tp_price, tp_pips, safe_divide(tp_pips, stop_pips, "risk reward ratio")

    def _break_even_pips(self, account_balance: float, pip_value: float) -> float:
        fee_pips = ZERO
        if self._fee_percent > 0:
            fee_amount = percent_of(account_balance, self._fee_percent)
            fee_pips = safe_divide(fee_amount, pip_value, "fee conversion")
        return self._spread_pips + fee_pips

    def _validate(self, params: TradeParameters) -> None:
        """Reject malformed parameters before any calculation."""
        validate_positive(params.account_balance, "account_balance")
        validate_percentage(params.risk_percent, "risk_percent")
        validate_positive(params.entry_price, "entry_price")
        validate_enum(params.instrument, InstrumentType, "instrument")
        validate_enum(params.lot_size, LotSizeType, "lot_size")
        validate_enum(params.direction, Direction, "direction")
        if params.contract_size is not None:
            validate_non_negative(params.contract_size, "contract_size")

        has_stop_pips = params.stop_loss_pips is not None
        if has_stop_pips == params.is_stop_loss_price_override:
            raise ValidationError("Exactly one of stop_loss_pips or stop_loss_price is required")
        if has_stop_pips:
            validate_positive(params.stop_loss_pips, "stop_loss_pips")  # type: ignore[arg-type]
        else:
            validate_positive(params.stop_loss_price, "stop_loss_price")  # type: ignore[arg-type]
            self._validate_side(params, params.stop_loss_price, "stop_loss_price", profit_side=False)  # type: ignore[arg-type]

        if params.take_profit_price is not None:
            validate_positive(params.take_profit_price, "take_profit_price")
            self._validate_side(params, params.take_profit_price, "take_profit_price", profit_side=True)
        elif params.take_profit_pips is not None:
            validate_positive(params.take_profit_pips, "take_profit_pips")
        elif params.risk_reward_ratio is not None:
            validate_positive(params.risk_reward_ratio, "risk_reward_ratio")
        else:
            raise ValidationError(
                "Take profit requires take_profit_pips, take_profit_price or risk_reward_ratio"
            )

        if params.tp1_percent is not None or params.tp2_percent is not None:
            if not params.has_split:
                raise ValidationError("Both tp1_percent and tp2_percent are required for a split")
            validate_split(params.tp1_percent, params.tp2_percent)  # type: ignore[arg-type]

    @staticmethod
    def _validate_side(
        params: TradeParameters, level: float, param_name: str, profit_side: bool
    ) -> None:
        """A stop must sit on the losing side of entry, a target on the winning side.

        A stop exactly at entry is left to the zero-distance check.
        """
        offset = (level - params.entry_price) * params.direction.sign
        if profit_side and offset <= 0:
            raise ValidationError(
                f"{param_name} {level} is not beyond entry {params.entry_price} "
                f"for a {params.direction.value} trade"
            )
        if not profit_side and offset > 0:
            raise ValidationError(
                f"{param_name} {level} is on the profit side of entry {params.entry_price} "
                f"for a {params.direction.value} trade"
            )
