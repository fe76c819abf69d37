"""
Unit tests for custom exceptions.
"""

from fxbacktest.core.exceptions.backtest import (
    BacktestException,
    CalculationError,
    ConfigurationError,
    DataError,
    OutcomeAlreadySetError,
    TaskError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Tests for the exception hierarchy."""

    def test_should_derive_from_base_exception(self) -> None:
        """Test every domain error is a BacktestException."""
        for exc_type in (ValidationError, DataError, CalculationError):
            assert issubclass(exc_type, BacktestException)
        assert issubclass(ConfigurationError, ValidationError)
        assert issubclass(OutcomeAlreadySetError, ValidationError)


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_should_carry_field_name(self) -> None:
        """Test field is stored and included in the message."""
        exc = ConfigurationError("risk_per_trade", "must be between 0 and 100")

        assert exc.field == "risk_per_trade"
        assert str(exc) == "Invalid configuration for risk_per_trade: must be between 0 and 100"


class TestTaskError:
    """Tests for TaskError."""

    def test_should_describe_cause(self) -> None:
        """Test message includes the strategy and cause type."""
        cause = DataError("Data file not found: eurusd.csv")
        exc = TaskError("eurusd", cause)

        assert exc.strategy_name == "eurusd"
        assert exc.cause is cause
        assert str(exc) == "Strategy 'eurusd' failed: DataError: Data file not found: eurusd.csv"


class TestOutcomeAlreadySetError:
    """Tests for OutcomeAlreadySetError."""

    def test_should_name_trade_and_outcome(self) -> None:
        """Test attributes and message."""
        exc = OutcomeAlreadySetError(3, "win_at_tp1")

        assert exc.trade_index == 3
        assert exc.outcome == "win_at_tp1"
        assert "Trade 3 already resolved as win_at_tp1" in str(exc)
