"""Pydantic models for curve parameters supplied as JSON.

Integers are accepted as decimal strings (JSON numbers lose precision above
2^53) or plain ints, and validated to the unsigned 128-bit range.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Discriminator, Field, Tag

from psm.constants import RAY, U128_MAX


def validate_u128(value: Any) -> int:
    """Validate that a value is a valid u128, as int or decimal string.

    Raises:
        ValueError: If value is not a non-negative integer within u128 range
    """
    if isinstance(value, bool):
        raise ValueError("U128 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"U128 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"U128 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"U128 cannot be negative: {value}")
    if value > U128_MAX:
        raise ValueError(f"U128 overflow: {value} > 2^128-1")
    return value


# 128-bit unsigned integer (validated)
U128 = Annotated[
    int,
    BeforeValidator(validate_u128),
    Field(description="128-bit unsigned integer as decimal string or int"),
]


class ConstantPriceParams(BaseModel):
    """Parameters of a constant price curve."""

    curve_type: Literal["constant_price"] = "constant_price"
    token_b_price: U128 = Field(
        alias="tokenBPrice", description="Token A per token B, scaled by 1e27."
    )

    model_config = {"populate_by_name": True}


class RedemptionRateParams(BaseModel):
    """Parameters of a redemption rate curve."""

    curve_type: Literal["redemption_rate"] = "redemption_rate"
    ray: U128 = Field(default=RAY, description="Fixed-point scaling factor.")
    max_ssr: U128 = Field(default=0, alias="maxSsr", description="Cap on ssr, 0 for none.")
    ssr: U128 = Field(description="Per-second savings rate, scaled by ray.")
    rho: U128 = Field(description="Timestamp of the last checkpoint.")
    chi: U128 = Field(description="Index at rho, scaled by ray.")

    model_config = {"populate_by_name": True}


def _get_curve_type(v: dict[str, Any] | ConstantPriceParams | RedemptionRateParams) -> str:
    """Discriminator function for CurveParams union type."""
    if isinstance(v, dict):
        return str(v.get("curve_type", v.get("curveType", "")))
    return v.curve_type


# Discriminated union: Pydantic will use the 'curve_type' field to determine the type
CurveParams = Annotated[
    Annotated[ConstantPriceParams, Tag("constant_price")]
    | Annotated[RedemptionRateParams, Tag("redemption_rate")],
    Discriminator(_get_curve_type),
]
