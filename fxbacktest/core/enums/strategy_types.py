"""
Strategy, risk model and resolution policy enumerations.
"""

from enum import StrEnum


class StrategyType(StrEnum):
    """
    Stop loss / take profit placement strategies.

    DYNAMIC_TARGET has no dedicated placement rule and uses the
    percentage-of-price default.
    """

    FIXED_RR = "fixed_rr"  # Constant pip offsets from entry
    STRUCTURE_BASED = "structure_based"  # Recent swing high/low
    DYNAMIC_TARGET = "dynamic_target"

    @classmethod
    def parse(cls, value: "str | StrategyType") -> "StrategyType":
        """Parse a strategy name, accepting CamelCase spellings like 'FixedRR'."""
        if isinstance(value, cls):
            return value
        aliases = {
            "fixedrr": cls.FIXED_RR,
            "structurebased": cls.STRUCTURE_BASED,
            "dynamictarget": cls.DYNAMIC_TARGET,
        }
        key = str(value).replace("_", "").replace("-", "").replace(" ", "").lower()
        if key not in aliases:
            raise ValueError(f"Unknown strategy type: {value}")
        return aliases[key]


class RiskModel(StrEnum):
    """
    Risk allocation models.

    FIXED sizes every trade on the initial balance, COMPOUNDING on the
    running balance, KELLY_CRITERION adapts the risk percentage to the
    observed win rate.
    """

    FIXED = "fixed"
    COMPOUNDING = "compounding"
    KELLY_CRITERION = "kelly_criterion"


class TieBreakPolicy(StrEnum):
    """Which level wins when a single candle crosses both stop and target."""

    STOP_FIRST = "stop_first"
    TARGET_FIRST = "target_first"


class SimulatorState(StrEnum):
    """Lifecycle states of a single simulation run."""

    IDLE = "idle"
    SCANNING = "scanning"
    POSITIONED = "positioned"
    RESOLVING = "resolving"
    DONE = "done"
