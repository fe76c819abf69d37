"""
Unit tests for enum types.
"""

import pytest

from fxbacktest.core.enums import (
    Direction,
    InstrumentType,
    LotSizeType,
    StrategyType,
    TradeOutcome,
)


class TestInstrumentType:
    """Tests for InstrumentType pip conversions."""

    def test_should_convert_forex_pips(self) -> None:
        """Test forex uses 4-decimal pips."""
        assert InstrumentType.FOREX.to_pips(0.0010) == pytest.approx(10.0)
        assert InstrumentType.FOREX.to_price(20.0) == pytest.approx(0.0020)

    def test_should_convert_gold_and_index_pips(self) -> None:
        """Test gold and indices use 0.1 pips."""
        assert InstrumentType.GOLD.to_pips(2.5) == pytest.approx(25.0)
        assert InstrumentType.INDICES.to_price(15.0) == pytest.approx(1.5)

    def test_should_use_absolute_distance(self) -> None:
        """Test negative distances convert to positive pips."""
        assert InstrumentType.FOREX.to_pips(-0.0005) == pytest.approx(5.0)


class TestLotSizeType:
    """Tests for LotSizeType."""

    def test_should_map_contract_sizes(self) -> None:
        """Test standard, mini and micro contract sizes."""
        assert LotSizeType.STANDARD.contract_size == 100000.0
        assert LotSizeType.MINI.contract_size == 10000.0
        assert LotSizeType.MICRO.contract_size == 1000.0


class TestDirection:
    """Tests for Direction."""

    def test_should_expose_sign_and_opposite(self) -> None:
        """Test sign and opposite helpers."""
        assert Direction.LONG.sign == 1.0
        assert Direction.SHORT.sign == -1.0
        assert Direction.LONG.opposite() == Direction.SHORT
        assert not Direction.SHORT.is_long


class TestStrategyType:
    """Tests for StrategyType parsing."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("FixedRR", StrategyType.FIXED_RR),
            ("fixed_rr", StrategyType.FIXED_RR),
            ("StructureBased", StrategyType.STRUCTURE_BASED),
            ("dynamic-target", StrategyType.DYNAMIC_TARGET),
            (StrategyType.DYNAMIC_TARGET, StrategyType.DYNAMIC_TARGET),
        ],
    )
    def test_should_parse_spellings(self, name: str, expected: StrategyType) -> None:
        """Test CamelCase and snake_case names parse."""
        assert StrategyType.parse(name) == expected

    def test_should_reject_unknown_name(self) -> None:
        """Test unknown strategies raise ValueError."""
        with pytest.raises(ValueError, match="Unknown strategy type"):
            StrategyType.parse("Martingale")


class TestTradeOutcome:
    """Tests for TradeOutcome properties."""

    def test_should_classify_outcomes(self) -> None:
        """Test win, loss and resolved flags."""
        assert TradeOutcome.WIN_AT_TP1.is_win
        assert TradeOutcome.WIN_AT_TP2.is_win
        assert TradeOutcome.LOSS_AT_SL.is_loss
        assert not TradeOutcome.BREAK_EVEN.is_win
        assert not TradeOutcome.BREAK_EVEN.is_loss
        assert not TradeOutcome.PENDING.is_resolved

    def test_should_have_labels(self) -> None:
        """Test report labels."""
        assert TradeOutcome.LOSS_AT_SL.label == "Loss at SL"
        assert TradeOutcome.BREAK_EVEN.label == "Break Even"
