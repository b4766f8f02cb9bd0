"""Curve calculators.

Re-exports the calculator contract, both curve variants and the tagged
SwapCurve record.
"""

from psm.curve.base import CurveType, SwapCurve
from psm.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
    map_zero_to_none,
    trading_tokens_to_pool_tokens,
)
from psm.curve.constant_price import ConstantPriceCurve
from psm.curve.parsing import curve_to_params, parse_curve
from psm.curve.redemption_rate import RedemptionRateCurve

__all__ = [
    # Contract
    "CurveCalculator",
    "RoundDirection",
    "SwapWithoutFeesResult",
    "TradeDirection",
    "TradingTokenResult",
    "map_zero_to_none",
    "trading_tokens_to_pool_tokens",
    # Variants
    "ConstantPriceCurve",
    "RedemptionRateCurve",
    # Tagged record
    "CurveType",
    "SwapCurve",
    # Parsing
    "curve_to_params",
    "parse_curve",
]
