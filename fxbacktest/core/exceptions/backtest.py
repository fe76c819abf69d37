"""
Custom exception hierarchy for the backtesting core.

This module defines domain-specific exceptions for better error handling.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class DataError(BacktestException):
    """Raised when a candle series or price file cannot be used."""

    pass


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class ConfigurationError(ValidationError):
    """Raised when configuration is invalid."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid configuration for {field}: {message}")


class TaskError(BacktestException):
    """Raised when a batch worker fails for a single strategy."""

    def __init__(self, strategy_name: str, cause: BaseException):
        self.strategy_name = strategy_name
        self.cause = cause
        super().__init__(
            f"Strategy {strategy_name!r} failed: {type(cause).__name__}: {cause}"
        )


class OutcomeAlreadySetError(ValidationError):
    """Raised when a trade outcome is resolved more than once."""

    def __init__(self, trade_index: int, outcome: str):
        self.trade_index = trade_index
        self.outcome = outcome
        super().__init__(f"Trade {trade_index} already resolved as {outcome}")
