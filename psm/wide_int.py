"""Checked 256-bit unsigned integer for token amount math.

This module provides U256, a lightweight wrapper that keeps every
intermediate product of the curve math inside the uint256 domain:
- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- Results above 2^256-1 raise Overflow
- Narrowing back to 128 bits is explicit and fallible

Two styles are supported. Operators raise, which keeps formulas readable;
the ``checked`` decorator turns any such error into a ``None`` return at
the function boundary. The ``checked_*`` methods return ``None`` directly.

Usage pattern:
    from psm.wide_int import W, checked

    @checked
    def convert(amount: int, price: int, ray: int) -> int | None:
        # Wrap at entry
        value = W(amount) * W(price) // W(ray)  # Raises if ray == 0

        # Narrow at exit
        return value.to_u128()
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

import structlog

from psm.constants import U128_MAX, U256_MAX

logger = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")


class WideIntError(ArithmeticError):
    """Base class for U256 arithmetic errors."""

    pass


class DivisionByZero(WideIntError):
    """Division or modulo by zero."""

    pass


class Underflow(WideIntError):
    """Subtraction would produce negative result."""

    pass


class Overflow(WideIntError):
    """Result exceeds uint256 maximum."""

    pass


class U256:
    """Unsigned 256-bit integer with checked arithmetic.

    Every operator validates its result against [0, 2^256-1] and raises a
    WideIntError subclass instead of wrapping. Values are immutable.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | U256) -> None:
        """Create a U256 from an integer or another U256.

        Args:
            value: Integer value to wrap, or U256 to copy

        Raises:
            TypeError: If value is not an int or U256
            Underflow: If value is negative
            Overflow: If value exceeds 2^256-1
        """
        if isinstance(value, U256):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"U256 requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value cannot be uint256: {value}")
        if value > U256_MAX:
            raise Overflow(f"Value exceeds uint256 max: {value}")
        self._value = value

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"U256({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: U256 | int) -> U256:
        """Add two values.

        Raises:
            Overflow: If the sum exceeds 2^256-1
        """
        other_val = _extract_value(other)
        result = self._value + other_val
        if result > U256_MAX:
            raise Overflow(f"Overflow: {self._value} + {other_val}")
        return U256(result)

    def __radd__(self, other: int) -> U256:
        return self.__add__(other)

    def __sub__(self, other: U256 | int) -> U256:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return U256(result)

    def __rsub__(self, other: int) -> U256:
        return U256(other).__sub__(self)

    def __mul__(self, other: U256 | int) -> U256:
        """Multiply two values.

        Raises:
            Overflow: If the product exceeds 2^256-1
        """
        other_val = _extract_value(other)
        result = self._value * other_val
        if result > U256_MAX:
            raise Overflow(f"Overflow: {self._value} * {other_val}")
        return U256(result)

    def __rmul__(self, other: int) -> U256:
        return self.__mul__(other)

    def __floordiv__(self, other: U256 | int) -> U256:
        """Integer division (floor).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return U256(self._value // other_val)

    def __rfloordiv__(self, other: int) -> U256:
        return U256(other).__floordiv__(self)

    def __mod__(self, other: U256 | int) -> U256:
        """Modulo operation.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return U256(self._value % other_val)

    def __truediv__(self, other: object) -> U256:
        raise TypeError("U256 does not support true division, use // or ceil_div()")

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, U256):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: U256 | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: U256 | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: U256 | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: U256 | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def ceil_div(self, other: U256 | int) -> U256:
        """Ceiling division (rounds up).

        Computed from the quotient and remainder, so ``self + other - 1``
        is never formed and cannot overflow.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        quotient, remainder = divmod(self._value, other_val)
        if remainder:
            quotient += 1
        return U256(quotient)

    def min(self, other: U256 | int) -> U256:
        """Return minimum of self and other."""
        return U256(min(self._value, _extract_value(other)))

    def checked_add(self, other: U256 | int) -> U256 | None:
        """Add, returning None on overflow instead of raising."""
        result = self._value + _extract_value(other)
        if result > U256_MAX:
            return None
        return U256(result)

    def checked_sub(self, other: U256 | int) -> U256 | None:
        """Subtract, returning None on underflow instead of raising."""
        result = self._value - _extract_value(other)
        if result < 0:
            return None
        return U256(result)

    def checked_mul(self, other: U256 | int) -> U256 | None:
        """Multiply, returning None on overflow instead of raising."""
        result = self._value * _extract_value(other)
        if result > U256_MAX:
            return None
        return U256(result)

    def checked_div(self, other: U256 | int) -> U256 | None:
        """Divide, returning None on zero instead of raising."""
        other_val = _extract_value(other)
        if other_val == 0:
            return None
        return U256(self._value // other_val)

    def checked_ceil_div(self, other: U256 | int) -> U256 | None:
        """Ceiling division, returning None on zero instead of raising."""
        if _extract_value(other) == 0:
            return None
        return self.ceil_div(other)

    def to_u128(self) -> int | None:
        """Narrow to 128 bits, returning None if the value does not fit."""
        if self._value > U128_MAX:
            return None
        return self._value


def _extract_value(x: U256 | int) -> int:
    """Extract integer value from U256 or int."""
    if isinstance(x, U256):
        return x._value
    return x


def narrow(value: U256) -> int:
    """Narrow to 128 bits, raising Overflow when the value does not fit.

    For use inside ``checked`` functions, where the raise becomes None.
    """
    narrowed = value.to_u128()
    if narrowed is None:
        raise Overflow(f"Value exceeds u128 max: {value.value}")
    return narrowed


def checked(func: Callable[P, T]) -> Callable[P, T | None]:
    """Turn WideIntError raised inside ``func`` into a None return.

    Lets the curve math be written as plain operator expressions while
    still exposing the "value or absence" contract to callers.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
        try:
            return func(*args, **kwargs)
        except WideIntError as err:
            logger.debug("checked_math_failed", operation=func.__qualname__, error=str(err))
            return None

    return wrapper


# Convenience alias for concise code
W = U256
