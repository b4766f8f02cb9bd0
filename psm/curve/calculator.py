"""Base classes and shared math for curve calculators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Self

from psm.constants import INITIAL_SWAP_POOL_AMOUNT, U128_MAX, U256_MAX
from psm.errors import EmptySupply, InvalidCurveData
from psm.wide_int import U256, checked, narrow

FIELD_SIZE = 16


class TradeDirection(Enum):
    """Which token is traded in. A is the reference (pricing) token."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    def opposite(self) -> TradeDirection:
        if self is TradeDirection.A_TO_B:
            return TradeDirection.B_TO_A
        return TradeDirection.A_TO_B


class RoundDirection(Enum):
    """Which party absorbs the integer truncation remainder.

    FLOOR favors the pool when it pays out (withdrawals); CEILING favors the
    pool when it takes in (deposits).
    """

    FLOOR = "floor"
    CEILING = "ceiling"


@dataclass(frozen=True)
class SwapWithoutFeesResult:
    """Amounts moved by a swap before any fee layer is applied."""

    source_amount_swapped: int
    destination_amount_swapped: int


@dataclass(frozen=True)
class TradingTokenResult:
    """Trading token amounts equivalent to some amount of pool tokens."""

    token_a_amount: int
    token_b_amount: int


def map_zero_to_none(value: int) -> int | None:
    """Treat a zero transfer as a failed operation."""
    if value == 0:
        return None
    return value


def pack_u128_fields(*values: int) -> bytes:
    """Pack values as consecutive little-endian u128 fields."""
    return b"".join(v.to_bytes(FIELD_SIZE, "little") for v in values)


def unpack_u128_fields(data: bytes, count: int) -> list[int]:
    """Read ``count`` consecutive little-endian u128 fields from ``data``.

    Raises:
        InvalidCurveData: If data is shorter than count fields
    """
    if len(data) < count * FIELD_SIZE:
        raise InvalidCurveData(f"Expected at least {count * FIELD_SIZE} bytes, got {len(data)}")
    return [
        int.from_bytes(data[i * FIELD_SIZE : (i + 1) * FIELD_SIZE], "little") for i in range(count)
    ]


def check_u128_fields(**fields: int) -> None:
    """Reject record fields that do not fit an unsigned 128-bit integer."""
    for name, value in fields.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidCurveData(f"{name} must be an int, got {type(value).__name__}")
        if not 0 <= value <= U128_MAX:
            raise InvalidCurveData(f"{name} out of u128 range: {value}")


@checked
def swap_at_price(
    source_amount: int,
    token_b_price: int,
    ray: int,
    trade_direction: TradeDirection,
) -> SwapWithoutFeesResult | None:
    """Swap at a fixed ray-scaled price of token B in token A.

    Selling B pays floor(amount * price). Buying B only charges for whole
    units of B: the destination is floored, then the source actually used is
    the ceiling of destination * price, which never exceeds what was offered.
    Zero on either side fails.
    """
    price = U256(token_b_price)
    source = U256(source_amount)
    scale = U256(ray)

    if trade_direction is TradeDirection.B_TO_A:
        source_used = source
        destination = source * price // scale
    else:
        destination = source * scale // price
        source_used = (destination * price).ceil_div(scale)
        if source_used > source:
            return None

    source_used_u128 = map_zero_to_none(narrow(source_used))
    destination_u128 = map_zero_to_none(narrow(destination))
    if source_used_u128 is None or destination_u128 is None:
        return None
    return SwapWithoutFeesResult(
        source_amount_swapped=source_used_u128,
        destination_amount_swapped=destination_u128,
    )


@checked
def trading_tokens_to_pool_tokens(
    token_b_price: int,
    ray: int,
    source_amount: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    pool_supply: int,
    trade_direction: TradeDirection,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens equivalent to a single-sided amount of token A or B.

    The pool is valued additively in units of token A:
    ``total = reserve_a + reserve_b * price``, and the given amount is
    credited pro rata against the current supply.
    """
    price = U256(token_b_price)
    scale = U256(ray)

    if trade_direction is TradeDirection.A_TO_B:
        given_value = U256(source_amount)
    else:
        given_value = U256(source_amount) * price // scale

    total_value = U256(swap_token_b_amount) * price // scale + U256(swap_token_a_amount)
    numerator = U256(pool_supply) * given_value

    if round_direction is RoundDirection.FLOOR:
        return narrow(numerator // total_value)
    return narrow(numerator.ceil_div(total_value))


@checked
def normalized_value_at_price(
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    token_b_price: int,
    ray: int,
) -> int:
    """Half of the pool's additive value, in units of token A."""
    token_a_value = U256(swap_token_a_amount)
    token_b_value = U256(swap_token_b_amount) * U256(token_b_price) // U256(ray)

    # Close to the limit, halve each side so the uint256 add cannot overflow.
    # Such a sum never fits u128, so narrow rejects it either way.
    if token_b_value > U256_MAX - U128_MAX:
        value = token_b_value // 2 + token_a_value // 2
    else:
        value = (token_a_value + token_b_value) // 2
    return narrow(value)


class CurveCalculator(ABC):
    """Abstract base class for curve calculators.

    All amounts are unsigned 128-bit integers. Methods that return
    ``X | None`` return None whenever the math overflows, divides by zero or
    would move nothing; callers must then reject the whole operation.

    ``timestamp`` is required by time-dependent curves and ignored by the
    others.
    """

    LEN: ClassVar[int]

    @abstractmethod
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> SwapWithoutFeesResult | None:
        """Calculate how much source is taken and destination is paid.

        Args:
            source_amount: Amount of source token offered
            swap_source_amount: Pool reserve of the source token
            swap_destination_amount: Pool reserve of the destination token
            trade_direction: Which token is the source
            timestamp: Current unix timestamp

        Returns:
            Amounts swapped, or None if the swap fails or would move zero
        """
        ...

    @abstractmethod
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
        timestamp: int | None = None,
    ) -> TradingTokenResult | None:
        """Convert pool tokens into trading token amounts, rounding per round_direction."""
        ...

    @abstractmethod
    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> int | None:
        """Pool tokens minted for depositing only one side (rounded down)."""
        ...

    @abstractmethod
    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
        timestamp: int | None = None,
    ) -> int | None:
        """Pool tokens to burn for withdrawing exactly source_amount of one side."""
        ...

    @abstractmethod
    def validate(self, timestamp: int | None = None) -> None:
        """Raise a SwapError if the curve cannot price trades."""
        ...

    def validate_supply(self, token_a_amount: int, token_b_amount: int) -> None:
        """Reject pool initialization with no reference token.

        Raises:
            EmptySupply: If token_a_amount is zero
        """
        if token_a_amount == 0:
            raise EmptySupply("Pool requires a non-zero token A supply")

    @abstractmethod
    def normalized_value(
        self,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        timestamp: int | None = None,
    ) -> int | None:
        """Total pool worth in token A units, halved: (a + b * price) / 2."""
        ...

    def new_pool_supply(self) -> int:
        """Pool tokens minted to the first depositor."""
        return INITIAL_SWAP_POOL_AMOUNT

    @abstractmethod
    def pack(self) -> bytes:
        """Encode the record as exactly LEN bytes."""
        ...

    @classmethod
    @abstractmethod
    def unpack(cls, data: bytes) -> Self:
        """Decode a record from the first LEN bytes of data."""
        ...
