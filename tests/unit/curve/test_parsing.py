"""Tests for building curves from JSON-style parameters."""

import json

import pytest

from psm.constants import U128_MAX
from psm.curve import ConstantPriceCurve, CurveType, RedemptionRateCurve, SwapCurve
from psm.curve.parsing import curve_to_params, parse_curve, parse_curve_params
from psm.errors import InvalidCurveData
from psm.models import ConstantPriceParams, RedemptionRateParams, validate_u128
from tests.helpers import FIVE_PCT_APY_SSR, RAY, TWO_RAY


class TestValidateU128:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), ("0", 0), ("12345", 12345), (U128_MAX, U128_MAX), (str(U128_MAX), U128_MAX)],
    )
    def test_accepts(self, value, expected):
        assert validate_u128(value) == expected

    @pytest.mark.parametrize(
        "value,match",
        [
            (-1, "negative"),
            (U128_MAX + 1, "overflow"),
            (True, "boolean"),
            ("1.5", "decimal integer"),
            ("abc", "decimal integer"),
            (1.0, "string or int"),
        ],
    )
    def test_rejects(self, value, match):
        with pytest.raises(ValueError, match=match):
            validate_u128(value)


class TestParseCurve:
    def test_constant_price_alias(self):
        curve = parse_curve({"curve_type": "constant_price", "tokenBPrice": str(TWO_RAY)})
        assert curve.curve_type is CurveType.CONSTANT_PRICE
        assert curve.calculator == ConstantPriceCurve(token_b_price=TWO_RAY)

    def test_constant_price_field_name(self):
        curve = parse_curve({"curve_type": "constant_price", "token_b_price": TWO_RAY})
        assert curve.calculator == ConstantPriceCurve(token_b_price=TWO_RAY)

    def test_redemption_rate_defaults(self):
        curve = parse_curve(
            {"curve_type": "redemption_rate", "ssr": str(RAY), "rho": "0", "chi": str(TWO_RAY)}
        )
        assert curve.curve_type is CurveType.REDEMPTION_RATE
        assert curve.calculator == RedemptionRateCurve(
            ray=RAY, max_ssr=0, ssr=RAY, rho=0, chi=TWO_RAY
        )

    def test_redemption_rate_all_fields(self):
        curve = parse_curve(
            {
                "curveType": "redemption_rate",
                "ray": str(RAY),
                "maxSsr": str(FIVE_PCT_APY_SSR),
                "ssr": str(FIVE_PCT_APY_SSR),
                "rho": 1_700_000_000,
                "chi": str(RAY),
            }
        )
        assert curve.calculator == RedemptionRateCurve(
            ray=RAY, max_ssr=FIVE_PCT_APY_SSR, ssr=FIVE_PCT_APY_SSR, rho=1_700_000_000, chi=RAY
        )

    def test_from_json_text(self):
        text = json.dumps({"curve_type": "constant_price", "tokenBPrice": str(RAY)})
        assert parse_curve(json.loads(text)).calculator.token_b_price == RAY

    def test_params_model_type(self):
        params = parse_curve_params({"curve_type": "constant_price", "tokenBPrice": "1"})
        assert isinstance(params, ConstantPriceParams)

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"curve_type": "stable", "tokenBPrice": "1"},
            {"curve_type": "constant_price"},
            {"curve_type": "constant_price", "tokenBPrice": "-5"},
            {"curve_type": "constant_price", "tokenBPrice": str(U128_MAX + 1)},
            {"curve_type": "redemption_rate", "ssr": str(RAY), "rho": "0"},
            {"curve_type": "redemption_rate", "ssr": "1e27", "rho": "0", "chi": str(RAY)},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(InvalidCurveData):
            parse_curve(data)


class TestCurveToParams:
    @pytest.mark.parametrize(
        "calculator",
        [
            ConstantPriceCurve(token_b_price=TWO_RAY),
            RedemptionRateCurve(
                ray=RAY, max_ssr=FIVE_PCT_APY_SSR, ssr=FIVE_PCT_APY_SSR, rho=42, chi=TWO_RAY
            ),
        ],
    )
    @pytest.mark.parametrize("by_alias", [False, True])
    def test_inverse_of_parse(self, calculator, by_alias):
        curve = SwapCurve.from_calculator(calculator)
        params = curve_to_params(curve)
        assert parse_curve(params.model_dump(by_alias=by_alias)) == curve

    def test_aliases_in_dump(self, accruing_rate_curve):
        params = curve_to_params(SwapCurve.from_calculator(accruing_rate_curve))
        assert isinstance(params, RedemptionRateParams)
        dumped = params.model_dump(by_alias=True)
        assert dumped["maxSsr"] == FIVE_PCT_APY_SSR
        assert dumped["curve_type"] == "redemption_rate"
