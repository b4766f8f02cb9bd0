"""Tagged curve record: a discriminant byte plus the calculator's fields.

The byte layout is shared with the rest of the system and must not change:

    offset 0      curve_type (u8)
    offset 1..81  calculator fields (u128 little-endian), zero-padded to 80 bytes
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from psm.errors import InvalidCurveData, InvalidCurveType

from .calculator import CurveCalculator
from .constant_price import ConstantPriceCurve
from .redemption_rate import RedemptionRateCurve


class CurveType(IntEnum):
    """Discriminant stored in the first byte of a packed curve."""

    CONSTANT_PRICE = 0
    REDEMPTION_RATE = 1


CALCULATOR_CLASSES: dict[CurveType, type[CurveCalculator]] = {
    CurveType.CONSTANT_PRICE: ConstantPriceCurve,
    CurveType.REDEMPTION_RATE: RedemptionRateCurve,
}

# Largest calculator layout; smaller ones are zero-padded
CALCULATOR_LEN = max(cls.LEN for cls in CALCULATOR_CLASSES.values())


@dataclass(frozen=True)
class SwapCurve:
    """A curve calculator together with its explicit type tag."""

    LEN: ClassVar[int] = 1 + CALCULATOR_LEN

    curve_type: CurveType
    calculator: CurveCalculator

    def __post_init__(self) -> None:
        expected = CALCULATOR_CLASSES.get(self.curve_type)
        if expected is None or type(self.calculator) is not expected:
            raise InvalidCurveType(
                f"{type(self.calculator).__name__} does not match curve type {self.curve_type!r}"
            )

    @classmethod
    def from_calculator(cls, calculator: CurveCalculator) -> SwapCurve:
        """Wrap a calculator, deriving the tag from its class."""
        for curve_type, calculator_cls in CALCULATOR_CLASSES.items():
            if type(calculator) is calculator_cls:
                return cls(curve_type=curve_type, calculator=calculator)
        raise InvalidCurveType(f"Unsupported calculator {type(calculator).__name__}")

    def pack(self) -> bytes:
        """Encode as exactly LEN bytes."""
        body = self.calculator.pack().ljust(CALCULATOR_LEN, b"\x00")
        return bytes([self.curve_type]) + body

    @classmethod
    def unpack(cls, data: bytes) -> SwapCurve:
        """Decode from the first LEN bytes of data.

        Raises:
            InvalidCurveData: If data is shorter than LEN
            InvalidCurveType: If the discriminant is unknown
        """
        if len(data) < cls.LEN:
            raise InvalidCurveData(f"Expected at least {cls.LEN} bytes, got {len(data)}")
        try:
            curve_type = CurveType(data[0])
        except ValueError as err:
            raise InvalidCurveType(f"Unknown curve type {data[0]}") from err
        calculator = CALCULATOR_CLASSES[curve_type].unpack(data[1 : cls.LEN])
        return cls(curve_type=curve_type, calculator=calculator)
