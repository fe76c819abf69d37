"""
Risk profiles and Monte Carlo risk curves.

A RiskProfile is a plain tagged record; the risk percentage for a trade is
chosen by ``risk_percent_for`` with a match on the profile's model.
"""

from dataclasses import dataclass, field

import numpy as np

from fxbacktest.core import constants
from fxbacktest.core.enums import RiskModel
from fxbacktest.core.exceptions.backtest import ValidationError
from fxbacktest.core.utils.validation import validate_percentage, validate_positive

from .stats import annualized_sharpe, max_drawdown


@dataclass(frozen=True)
class RiskProfile:
    """Named risk allocation rule."""

    name: str
    default_risk: float  # Percent of balance
    model: RiskModel = RiskModel.COMPOUNDING

    def __post_init__(self) -> None:
        validate_percentage(self.default_risk, "default_risk")


CONSERVATIVE = RiskProfile("Conservative", 0.5, RiskModel.FIXED)
MODERATE = RiskProfile("Moderate", 1.0, RiskModel.COMPOUNDING)
AGGRESSIVE = RiskProfile("Aggressive (Kelly)", 2.0, RiskModel.KELLY_CRITERION)

PRESETS = {
    "conservative": CONSERVATIVE,
    "moderate": MODERATE,
    "aggressive": AGGRESSIVE,
}


def kelly_percent(win_rate: float, risk_reward_ratio: float) -> float:
    """Fractional Kelly stake as a percentage (may be negative)."""
    kelly = (win_rate * risk_reward_ratio - (1.0 - win_rate)) / risk_reward_ratio
    return kelly * constants.KELLY_FRACTION * 100.0


def risk_percent_for(profile: RiskProfile, win_rate: float, risk_reward_ratio: float) -> float:
    """Risk percentage to use for the next trade under ``profile``.

    Args:
        profile: Risk profile
        win_rate: Probability of a win, as a fraction in (0, 1)
        risk_reward_ratio: Reward per unit of risk

    Kelly falls back to the profile default when ``win_rate`` is outside
    (0, 1) or the ratio is not positive, and is clamped to [0, default].
    """
    match profile.model:
        case RiskModel.FIXED | RiskModel.COMPOUNDING:
            return profile.default_risk
        case RiskModel.KELLY_CRITERION:
            if not 0.0 < win_rate < 1.0 or risk_reward_ratio <= 0.0:
                return profile.default_risk
            return max(0.0, min(kelly_percent(win_rate, risk_reward_ratio), profile.default_risk))
    raise ValidationError(f"Unknown risk model: {profile.model}")


def sizing_balance(model: RiskModel, initial_balance: float, current_balance: float) -> float:
    """Balance that risk percentages are applied to.

    FIXED always sizes on the initial balance; the other models compound.
    """
    if model == RiskModel.FIXED:
        return initial_balance
    return current_balance


@dataclass(frozen=True)
class RiskCurveParams:
    """Inputs for a Monte Carlo risk curve."""

    initial_balance: float = constants.DEFAULT_INITIAL_BALANCE
    num_trades: int = constants.DEFAULT_RISK_CURVE_TRADES
    win_rate: float = constants.DEFAULT_RISK_CURVE_WIN_RATE
    risk_reward_ratio: float = constants.DEFAULT_RISK_REWARD_RATIO
    max_risk_per_trade: float = constants.DEFAULT_MAX_RISK_PER_TRADE

    def validate(self) -> "RiskCurveParams":
        validate_positive(self.initial_balance, "initial_balance")
        validate_positive(self.risk_reward_ratio, "risk_reward_ratio")
        validate_percentage(self.max_risk_per_trade, "max_risk_per_trade")
        if self.num_trades < 0:
            raise ValidationError(f"num_trades must be non-negative, got {self.num_trades}")
        if not 0.0 <= self.win_rate <= 1.0:
            raise ValidationError(f"win_rate must be between 0 and 1, got {self.win_rate}")
        return self


@dataclass(frozen=True)
class RiskCurveResult:
    balance_curve: list[float] = field(default_factory=list)
    final_balance: float = 0.0
    max_drawdown: float = 0.0
    max_drawdown_percent: float = 0.0
    max_consecutive_losses: int = 0
    sharpe_ratio: float = 0.0
    profit_factor: float = 0.0


def simulate_risk_curve(
    params: RiskCurveParams, profile: RiskProfile = MODERATE, seed: int | None = None
) -> RiskCurveResult:
    """Simulate a balance curve with random wins at ``params.win_rate``.

    The same ``seed`` always reproduces the same curve.
    """
    params.validate()
    rng = np.random.default_rng(seed)
    outcomes = rng.random(params.num_trades) < params.win_rate

    risk_percent = min(
        risk_percent_for(profile, params.win_rate, params.risk_reward_ratio),
        params.max_risk_per_trade,
    )

    balance = params.initial_balance
    curve = [balance]
    gross_profit = gross_loss = 0.0
    losing_run = longest_losing_run = 0
    for is_win in outcomes:
        base = sizing_balance(profile.model, params.initial_balance, balance)
        risk_amount = base * risk_percent / 100.0
        if is_win:
            pnl = risk_amount * params.risk_reward_ratio
            gross_profit += pnl
            losing_run = 0
        else:
            pnl = -risk_amount
            gross_loss += risk_amount
            losing_run += 1
            longest_losing_run = max(longest_losing_run, losing_run)
        balance += pnl
        curve.append(balance)

    dd, dd_percent, _ = max_drawdown(curve)
    return RiskCurveResult(
        balance_curve=curve,
        final_balance=balance,
        max_drawdown=dd,
        max_drawdown_percent=dd_percent,
        max_consecutive_losses=longest_losing_run,
        sharpe_ratio=annualized_sharpe(curve),
        profit_factor=gross_profit / gross_loss if gross_loss > 0 else 0.0,
    )
