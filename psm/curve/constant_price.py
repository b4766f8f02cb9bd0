"""Constant price curve.

Token B trades at a fixed price in token A, set when the pool is created.
The pool is valued additively (``a + b * price``) rather than with the
multiplicative ``a * b`` invariant most curves use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from psm.constants import RAY
from psm.errors import InvalidCurve
from psm.wide_int import U256, checked, narrow

from .calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
    check_u128_fields,
    normalized_value_at_price,
    pack_u128_fields,
    swap_at_price,
    trading_tokens_to_pool_tokens,
    unpack_u128_fields,
)


@dataclass(frozen=True)
class ConstantPriceCurve(CurveCalculator):
    """Fixed exchange ratio between the two pool tokens.

    Attributes:
        token_b_price: Amount of token A for one token B, scaled by RAY
    """

    LEN: ClassVar[int] = 16

    token_b_price: int

    def __post_init__(self) -> None:
        check_u128_fields(token_b_price=self.token_b_price)

    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> SwapWithoutFeesResult | None:
        """Charge only full multiples of the price; the remainder is not taken."""
        return swap_at_price(source_amount, self.token_b_price, RAY, trade_direction)

    @checked
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
        timestamp: int | None = None,
    ) -> TradingTokenResult | None:
        """Proportional share of each reserve."""
        pool_tokens_wide = U256(pool_tokens)
        supply = U256(pool_token_supply)
        token_a = pool_tokens_wide * U256(swap_token_a_amount)
        token_b = pool_tokens_wide * U256(swap_token_b_amount)

        if round_direction is RoundDirection.FLOOR:
            token_a, token_b = token_a // supply, token_b // supply
        else:
            token_a, token_b = token_a.ceil_div(supply), token_b.ceil_div(supply)

        return TradingTokenResult(token_a_amount=narrow(token_a), token_b_amount=narrow(token_b))

    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> int | None:
        return trading_tokens_to_pool_tokens(
            self.token_b_price,
            RAY,
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            RoundDirection.FLOOR,
        )

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
        return trading_tokens_to_pool_tokens(
            self.token_b_price,
            RAY,
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            round_direction,
        )

    def validate(self, timestamp: int | None = None) -> None:
        """Raises InvalidCurve if the price is zero."""
        if self.token_b_price == 0:
            raise InvalidCurve("Constant price curve has a zero token B price")

    def normalized_value(
        self,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        timestamp: int | None = None,
    ) -> int | None:
        return normalized_value_at_price(
            swap_token_a_amount, swap_token_b_amount, self.token_b_price, RAY
        )

    def pack(self) -> bytes:
        return pack_u128_fields(self.token_b_price)

    @classmethod
    def unpack(cls, data: bytes) -> ConstantPriceCurve:
        (token_b_price,) = unpack_u128_fields(data, 1)
        return cls(token_b_price=token_b_price)
