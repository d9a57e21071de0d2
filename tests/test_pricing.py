"""Tests for tick resolution, price rounding and quick-order price derivation.

All cases use exact Decimal values. Ties round half away from zero.
"""

from decimal import Decimal

import pytest

from quicky.exceptions import InternalError
from quicky.models import OrderSide
from quicky.pricing import count_tick_steps, derive_order_prices, format_price, round_to_tick


# ---------------------------------------------------------------------------
# count_tick_steps
# ---------------------------------------------------------------------------


class TestCountTickSteps:
    """Tests for the tick resolution utility."""

    @pytest.mark.parametrize("k", range(0, 10))
    def test_power_of_ten_returns_exponent(self, k: int) -> None:
        assert count_tick_steps(Decimal(1).scaleb(-k)) == k

    @pytest.mark.parametrize("tick", ["1", "5", "10", "2.5", "1000"])
    def test_tick_of_one_or_more_returns_zero(self, tick: str) -> None:
        assert count_tick_steps(Decimal(tick)) == 0

    def test_non_power_of_ten_ticks(self) -> None:
        assert count_tick_steps(Decimal("0.5")) == 1
        assert count_tick_steps(Decimal("0.25")) == 1
        assert count_tick_steps(Decimal("0.0005")) == 4

    def test_float_input_uses_its_decimal_text(self) -> None:
        assert count_tick_steps(0.0001) == 4  # type: ignore[arg-type]

    @pytest.mark.parametrize("tick", ["0", "-0.01", "Infinity", "NaN"])
    def test_invalid_tick_fails_fast(self, tick: str) -> None:
        with pytest.raises(ValueError):
            count_tick_steps(Decimal(tick))


# ---------------------------------------------------------------------------
# round_to_tick
# ---------------------------------------------------------------------------


class TestRoundToTick:
    """Tests for price rounding at a tick's resolution."""

    def test_rounds_down_below_half(self) -> None:
        assert round_to_tick(Decimal("99.994"), Decimal("0.01")) == Decimal("99.99")

    def test_rounds_up_above_half(self) -> None:
        assert round_to_tick(Decimal("99.996"), Decimal("0.01")) == Decimal("100.00")

    def test_positive_tie_rounds_away_from_zero(self) -> None:
        assert round_to_tick(Decimal("0.125"), Decimal("0.01")) == Decimal("0.13")
        assert round_to_tick(Decimal("99.995"), Decimal("0.01")) == Decimal("100.00")

    def test_negative_tie_rounds_away_from_zero(self) -> None:
        assert round_to_tick(Decimal("-0.125"), Decimal("0.01")) == Decimal("-0.13")

    def test_whole_number_tick(self) -> None:
        assert round_to_tick(Decimal("8123.5"), Decimal("1")) == Decimal("8124")

    def test_only_resolution_is_taken_from_tick(self) -> None:
        # 0.5 tick -> one decimal place, not multiples of 0.5
        assert round_to_tick(Decimal("1.26"), Decimal("0.5")) == Decimal("1.3")

    @pytest.mark.parametrize(
        "price, tick",
        [
            ("99.987654", "0.01"),
            ("0.51127", "0.0001"),
            ("8123.45", "0.5"),
            ("-3.14159", "0.001"),
        ],
    )
    def test_rounding_is_idempotent(self, price: str, tick: str) -> None:
        once = round_to_tick(Decimal(price), Decimal(tick))
        assert round_to_tick(once, Decimal(tick)) == once


# ---------------------------------------------------------------------------
# derive_order_prices
# ---------------------------------------------------------------------------


class TestDeriveOrderPrices:
    """Limit one tick inside the quote, stop-loss pct away on the losing side."""

    def test_buy_limit_one_tick_below(self) -> None:
        prices = derive_order_prices(
            Decimal("100.00"), Decimal("0.01"), OrderSide.BUY, Decimal("0.2")
        )
        assert prices.limit_price == Decimal("99.99")

    def test_sell_limit_one_tick_above(self) -> None:
        prices = derive_order_prices(
            Decimal("100.00"), Decimal("0.01"), OrderSide.SELL, Decimal("0.2")
        )
        assert prices.limit_price == Decimal("100.01")

    def test_buy_stop_loss_below_quote(self) -> None:
        prices = derive_order_prices(
            Decimal("100.00"), Decimal("0.01"), OrderSide.BUY, Decimal("0.2")
        )
        assert prices.stop_loss_price == Decimal("99.80")

    def test_sell_stop_loss_above_quote(self) -> None:
        prices = derive_order_prices(
            Decimal("100.00"), Decimal("0.01"), OrderSide.SELL, Decimal("0.2")
        )
        assert prices.stop_loss_price == Decimal("100.20")

    def test_xrp_buy_four_decimals(self) -> None:
        prices = derive_order_prices(
            Decimal("0.5123"), Decimal("0.0001"), OrderSide.BUY, Decimal("0.2")
        )
        # stop: 0.5123 * 0.998 = 0.5112754 -> 0.5113
        assert prices.limit_price == Decimal("0.5122")
        assert prices.stop_loss_price == Decimal("0.5113")

    def test_xrp_sell_four_decimals(self) -> None:
        prices = derive_order_prices(
            Decimal("0.5123"), Decimal("0.0001"), OrderSide.SELL, Decimal("0.2")
        )
        # stop: 0.5123 * 1.002 = 0.5133246 -> 0.5133
        assert prices.limit_price == Decimal("0.5124")
        assert prices.stop_loss_price == Decimal("0.5133")

    def test_derived_prices_are_tick_aligned(self) -> None:
        prices = derive_order_prices(
            Decimal("8123.456"), Decimal("0.5"), OrderSide.BUY, Decimal("1.5")
        )
        assert prices.limit_price == round_to_tick(prices.limit_price, Decimal("0.5"))
        assert prices.stop_loss_price == round_to_tick(prices.stop_loss_price, Decimal("0.5"))

    @pytest.mark.parametrize("quote", ["0.01", "0.005"])
    def test_buy_at_or_below_one_tick_has_no_valid_limit(self, quote: str) -> None:
        with pytest.raises(InternalError, match="must be positive"):
            derive_order_prices(Decimal(quote), Decimal("0.01"), OrderSide.BUY, Decimal("0.2"))

    def test_stop_loss_rounding_to_zero_is_rejected(self) -> None:
        # stop: 0.02 * 0.2 = 0.004 -> 0.00
        with pytest.raises(InternalError):
            derive_order_prices(Decimal("0.02"), Decimal("0.01"), OrderSide.BUY, Decimal("80"))

    def test_sell_at_tiny_quote_is_still_valid(self) -> None:
        prices = derive_order_prices(
            Decimal("0.01"), Decimal("0.01"), OrderSide.SELL, Decimal("0.2")
        )
        assert prices.limit_price == Decimal("0.02")
        assert prices.stop_loss_price == Decimal("0.01")


# ---------------------------------------------------------------------------
# format_price
# ---------------------------------------------------------------------------


class TestFormatPrice:
    def test_strips_trailing_zeros(self) -> None:
        assert format_price(Decimal("99.80")) == "99.8"

    def test_whole_value_has_no_point(self) -> None:
        assert format_price(Decimal("100.00")) == "100"
        assert format_price(Decimal("1E+2")) == "100"

    def test_keeps_significant_decimals(self) -> None:
        assert format_price(Decimal("0.5122")) == "0.5122"
        assert format_price(Decimal("99.99")) == "99.99"
