"""PSM curve engine - constant-pool AMM pricing with redemption-rate accrual."""

from psm.curve import (
    ConstantPriceCurve,
    CurveType,
    RedemptionRateCurve,
    RoundDirection,
    SwapCurve,
    TradeDirection,
)
from psm.engine import SwapEngine, process_curve_update

__version__ = "0.1.0"
__all__ = [
    "ConstantPriceCurve",
    "CurveType",
    "RedemptionRateCurve",
    "RoundDirection",
    "SwapCurve",
    "SwapEngine",
    "TradeDirection",
    "process_curve_update",
    "__version__",
]
