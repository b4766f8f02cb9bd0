"""Tests for the constant price curve."""

import pytest

from psm.constants import U128_MAX
from psm.curve import ConstantPriceCurve, RoundDirection, TradeDirection, TradingTokenResult
from psm.curve.calculator import SwapWithoutFeesResult
from psm.errors import InvalidCurve, InvalidCurveData
from tests.helpers import (
    CONVERSION_BASIS_POINTS_GUARANTEE,
    RAY,
    TWO_RAY,
    check_curve_value_from_swap,
    check_deposit_token_conversion,
    check_pool_value_from_deposit,
    check_pool_value_from_withdraw,
    check_withdraw_token_conversion,
)

POOL = 1_000_000_000


class TestConstruction:
    def test_fields(self):
        assert ConstantPriceCurve(token_b_price=TWO_RAY).token_b_price == TWO_RAY

    @pytest.mark.parametrize("price", [-1, U128_MAX + 1])
    def test_out_of_range_price_rejected(self, price):
        with pytest.raises(InvalidCurveData):
            ConstantPriceCurve(token_b_price=price)

    def test_immutable(self, constant_price_curve):
        with pytest.raises(AttributeError):
            constant_price_curve.token_b_price = RAY  # type: ignore[misc]


class TestSwap:
    def test_b_to_a(self, constant_price_curve):
        result = constant_price_curve.swap_without_fees(500, 1_000, 2_000, TradeDirection.B_TO_A)
        assert result == SwapWithoutFeesResult(500, 1_000)

    def test_a_to_b_keeps_remainder(self, constant_price_curve):
        result = constant_price_curve.swap_without_fees(999, 2_000, 1_000, TradeDirection.A_TO_B)
        assert result == SwapWithoutFeesResult(998, 499)

    def test_timestamp_is_ignored(self, constant_price_curve):
        without = constant_price_curve.swap_without_fees(10, 0, 0, TradeDirection.B_TO_A)
        with_ts = constant_price_curve.swap_without_fees(10, 0, 0, TradeDirection.B_TO_A, 12345)
        assert without == with_ts

    def test_single_unit_below_price_fails(self, constant_price_curve):
        result = constant_price_curve.swap_without_fees(1, 2_000, 1_000, TradeDirection.A_TO_B)
        assert result is None


class TestPoolTokenConversion:
    """Pool tokens convert to a proportional share of each reserve."""

    @pytest.mark.parametrize("round_direction", list(RoundDirection))
    def test_exact_share(self, constant_price_curve, round_direction):
        result = constant_price_curve.pool_tokens_to_trading_tokens(
            30, 100, 1_000, 500, round_direction
        )
        assert result == TradingTokenResult(300, 150)

    @pytest.mark.parametrize(
        "round_direction,expected",
        [
            (RoundDirection.FLOOR, TradingTokenResult(333, 166)),
            (RoundDirection.CEILING, TradingTokenResult(334, 167)),
        ],
    )
    def test_rounding(self, constant_price_curve, round_direction, expected):
        result = constant_price_curve.pool_tokens_to_trading_tokens(
            1, 3, 1_000, 500, round_direction
        )
        assert result == expected

    def test_zero_supply_fails(self, constant_price_curve):
        result = constant_price_curve.pool_tokens_to_trading_tokens(
            1, 0, 1_000, 500, RoundDirection.FLOOR
        )
        assert result is None

    def test_deposit_single_side_rounds_down(self, constant_price_curve):
        result = constant_price_curve.deposit_single_token_type(
            2_000_000, POOL, POOL, POOL, TradeDirection.A_TO_B
        )
        assert result == 666_666

    @pytest.mark.parametrize(
        "round_direction,expected",
        [(RoundDirection.FLOOR, 666_666), (RoundDirection.CEILING, 666_667)],
    )
    def test_withdraw_single_side(self, constant_price_curve, round_direction, expected):
        result = constant_price_curve.withdraw_single_token_type_exact_out(
            1_000_000, POOL, POOL, POOL, TradeDirection.B_TO_A, round_direction
        )
        assert result == expected


class TestValidation:
    def test_valid(self, constant_price_curve):
        constant_price_curve.validate()
        constant_price_curve.validate(1_700_000_000)

    def test_zero_price(self):
        with pytest.raises(InvalidCurve):
            ConstantPriceCurve(token_b_price=0).validate()

    def test_normalized_value(self, constant_price_curve):
        assert constant_price_curve.normalized_value(1_000, 500) == 1_000


class TestPacking:
    def test_pack(self, constant_price_curve):
        data = constant_price_curve.pack()
        assert len(data) == ConstantPriceCurve.LEN == 16
        assert data == TWO_RAY.to_bytes(16, "little")

    def test_unpack(self, constant_price_curve):
        assert ConstantPriceCurve.unpack(constant_price_curve.pack()) == constant_price_curve

    def test_unpack_short(self):
        with pytest.raises(InvalidCurveData):
            ConstantPriceCurve.unpack(bytes(15))


class TestValueInvariants:
    """Operations never lower the value of outstanding pool tokens."""

    @pytest.mark.parametrize("token_b_price", [TWO_RAY, 1_123_513 * RAY, RAY])
    @pytest.mark.parametrize("source", [1_123_513, 5_000_000, 77_777_777])
    @pytest.mark.parametrize("direction", list(TradeDirection))
    def test_swap(self, token_b_price, source, direction):
        curve = ConstantPriceCurve(token_b_price=token_b_price)
        reserve = 10**18
        check_curve_value_from_swap(curve, source, reserve, reserve, direction)

    @pytest.mark.parametrize(
        "pool_tokens,supply,a,b",
        [
            (1_000_000, POOL, 1_000_000, 1_000_000),
            (250_000_000, POOL, 4 * POOL, 2 * POOL),
            (1_000_000, POOL, 1_000_003, 999_999),
        ],
    )
    def test_deposit_and_withdraw(self, constant_price_curve, pool_tokens, supply, a, b):
        check_pool_value_from_deposit(constant_price_curve, pool_tokens, supply, a, b)
        check_pool_value_from_withdraw(constant_price_curve, pool_tokens, supply, a, b)

    @pytest.mark.parametrize("direction", list(TradeDirection))
    def test_deposit_token_conversion(self, constant_price_curve, direction):
        check_deposit_token_conversion(
            constant_price_curve,
            2_000_000,
            POOL,
            POOL,
            direction,
            POOL,
            CONVERSION_BASIS_POINTS_GUARANTEE,
        )

    @pytest.mark.parametrize("direction", list(TradeDirection))
    def test_withdraw_token_conversion(self, constant_price_curve, direction):
        check_withdraw_token_conversion(
            constant_price_curve,
            1_000_000,
            POOL,
            POOL,
            POOL,
            direction,
            CONVERSION_BASIS_POINTS_GUARANTEE,
        )
