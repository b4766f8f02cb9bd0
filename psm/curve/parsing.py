"""Curve parsing.

Functions to build curve records from JSON-style parameters and back.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from psm.errors import InvalidCurveData, InvalidCurveType
from psm.models import ConstantPriceParams, CurveParams, RedemptionRateParams

from .base import SwapCurve
from .constant_price import ConstantPriceCurve
from .redemption_rate import RedemptionRateCurve

logger = structlog.get_logger()

_CURVE_PARAMS_ADAPTER: TypeAdapter[ConstantPriceParams | RedemptionRateParams] = TypeAdapter(
    CurveParams
)


def parse_curve_params(data: dict[str, Any]) -> ConstantPriceParams | RedemptionRateParams:
    """Validate raw parameters into a CurveParams model.

    Raises:
        InvalidCurveData: If the parameters do not validate
    """
    try:
        return _CURVE_PARAMS_ADAPTER.validate_python(data)
    except ValidationError as err:
        logger.warning("curve_params_invalid", errors=err.error_count())
        raise InvalidCurveData(f"Invalid curve parameters: {err}") from err


def parse_curve(data: dict[str, Any]) -> SwapCurve:
    """Build a tagged curve from raw parameters.

    Args:
        data: Mapping with a ``curve_type`` of "constant_price" or
            "redemption_rate" and that curve's fields

    Returns:
        SwapCurve wrapping the matching calculator

    Raises:
        InvalidCurveData: If the parameters do not validate
    """
    params = parse_curve_params(data)
    calculator: ConstantPriceCurve | RedemptionRateCurve
    if isinstance(params, ConstantPriceParams):
        calculator = ConstantPriceCurve(token_b_price=params.token_b_price)
    else:
        calculator = RedemptionRateCurve(
            ray=params.ray,
            max_ssr=params.max_ssr,
            ssr=params.ssr,
            rho=params.rho,
            chi=params.chi,
        )
    curve = SwapCurve.from_calculator(calculator)
    logger.debug("curve_parsed", curve_type=curve.curve_type.name)
    return curve


def curve_to_params(curve: SwapCurve) -> ConstantPriceParams | RedemptionRateParams:
    """Inverse of parse_curve."""
    calculator = curve.calculator
    if isinstance(calculator, ConstantPriceCurve):
        return ConstantPriceParams(token_b_price=calculator.token_b_price)
    if isinstance(calculator, RedemptionRateCurve):
        return RedemptionRateParams(
            ray=calculator.ray,
            max_ssr=calculator.max_ssr,
            ssr=calculator.ssr,
            rho=calculator.rho,
            chi=calculator.chi,
        )
    raise InvalidCurveType(f"Unsupported calculator {type(calculator).__name__}")
