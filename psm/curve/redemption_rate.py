"""Redemption rate curve.

Token B is a yield-bearing token whose value in token A grows with a savings
rate index, in the manner of a savings-rate oracle (Spark PSM3 / sUSDS):

    conversion_rate(t) = chi * (ssr / ray) ** (t - rho)

``chi`` is the index committed at checkpoint ``rho`` and ``ssr`` is the
per-second compounding multiplier. The record is immutable: ``set_rates``
validates a new checkpoint against the old one and returns a fresh record.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import ClassVar

from psm.constants import RAY
from psm.errors import (
    CalculationFailure,
    ChiDecreased,
    ChiGrowthExceeded,
    InvalidCurve,
    MissingTimestamp,
    RhoDecreased,
    RhoInFuture,
    SsrAboveMax,
    SsrBelowRay,
)
from psm.math.fixed_point import rpow
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
class RedemptionRateCurve(CurveCalculator):
    """Time-varying exchange ratio driven by a compounding index.

    Attributes:
        ray: Fixed-point scaling factor, fixed at pool creation
        max_ssr: Upper bound for ssr and for claimed index growth (0 = no bound)
        ssr: Savings rate compounding per second, scaled by ray
        rho: Timestamp (seconds) of the last checkpoint
        chi: Index value at rho, scaled by ray
    """

    LEN: ClassVar[int] = 80

    ray: int = RAY
    max_ssr: int = 0
    ssr: int = RAY
    rho: int = 0
    chi: int = RAY

    def __post_init__(self) -> None:
        check_u128_fields(
            ray=self.ray, max_ssr=self.max_ssr, ssr=self.ssr, rho=self.rho, chi=self.chi
        )

    # --- Rate accrual ---

    def rpow(self, x: int, n: int) -> int | None:
        """x^n in this curve's ray fixed point, None on overflow."""
        if self.ray == 0:
            return None
        return rpow(x, n, self.ray)

    def get_conversion_rate(self, timestamp: int) -> int | None:
        """Project the index from the last checkpoint to ``timestamp``.

        Returns chi unchanged at the checkpoint itself, and None if the
        timestamp precedes rho or the projection overflows.
        """
        if timestamp == self.rho:
            return self.chi
        if timestamp < self.rho:
            return None
        growth = self.rpow(self.ssr, timestamp - self.rho)
        if growth is None:
            return None
        return _scale_index(growth, self.chi, self.ray)

    def set_rates(
        self, ssr: int, rho: int, chi: int, current_timestamp: int
    ) -> RedemptionRateCurve:
        """Validate a new checkpoint and return the updated record.

        The first commit (``self.rho == 0``) only needs the universal checks.
        Later commits must not move rho or chi backwards, and with a max_ssr
        set, chi may not exceed what max_ssr compounds to since the old rho.

        Raises:
            RhoInFuture: rho > current_timestamp
            SsrBelowRay: ssr < ray
            SsrAboveMax: max_ssr != 0 and ssr > max_ssr
            RhoDecreased: rho < self.rho
            ChiDecreased: chi < self.chi
            ChiGrowthExceeded: chi above the max_ssr growth bound
            CalculationFailure: the growth bound overflows
            InvalidCurveData: a new field does not fit 128 bits
        """
        if rho > current_timestamp:
            raise RhoInFuture(f"rho {rho} is after current timestamp {current_timestamp}")
        if ssr < self.ray:
            raise SsrBelowRay(f"ssr {ssr} is below ray {self.ray}")
        if self.max_ssr != 0 and ssr > self.max_ssr:
            raise SsrAboveMax(f"ssr {ssr} exceeds max_ssr {self.max_ssr}")

        if self.rho != 0:
            if rho < self.rho:
                raise RhoDecreased(f"rho {rho} is before last checkpoint {self.rho}")
            if chi < self.chi:
                raise ChiDecreased(f"chi {chi} is below last index {self.chi}")
            if self.max_ssr != 0:
                chi_max = self.max_chi(rho)
                if chi_max is None:
                    raise CalculationFailure(
                        f"max_ssr growth over {rho - self.rho}s overflows uint256"
                    )
                if chi > chi_max:
                    raise ChiGrowthExceeded(f"chi {chi} exceeds max reachable {chi_max}")

        return dataclasses.replace(self, ssr=ssr, rho=rho, chi=chi)

    def max_chi(self, rho: int) -> int | None:
        """Largest index max_ssr could reach between the last checkpoint and rho."""
        growth = self.rpow(self.max_ssr, rho - self.rho)
        if growth is None:
            return None
        return _scale_index(growth, self.chi, self.ray)

    # --- CurveCalculator ---

    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> SwapWithoutFeesResult | None:
        token_b_price = self._conversion_rate_or_none(timestamp)
        if token_b_price is None:
            return None
        return swap_at_price(source_amount, token_b_price, self.ray, trade_direction)

    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
        timestamp: int | None = None,
    ) -> TradingTokenResult | None:
        """Value the pool tokens in token A, then express that value in each token.

        Withdrawals (FLOOR) are clamped to the reserves.
        """
        token_b_price = self._conversion_rate_or_none(timestamp)
        if token_b_price is None:
            return None
        total_value = normalized_value_at_price(
            swap_token_a_amount, swap_token_b_amount, token_b_price, self.ray
        )
        if total_value is None:
            return None
        return self._value_to_trading_tokens(
            pool_tokens,
            pool_token_supply,
            total_value,
            token_b_price,
            swap_token_a_amount,
            swap_token_b_amount,
            round_direction,
        )

    @checked
    def _value_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        total_value: int,
        token_b_price: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult:
        value = U256(pool_tokens) * U256(total_value)
        supply = U256(pool_token_supply)
        price = U256(token_b_price)
        value_in_b = value * U256(self.ray)

        if round_direction is RoundDirection.FLOOR:
            token_a = (value // supply).min(swap_token_a_amount)
            token_b = (value_in_b // price // supply).min(swap_token_b_amount)
        else:
            token_a = value.ceil_div(supply)
            token_b = value_in_b.ceil_div(price).ceil_div(supply)

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
        token_b_price = self._conversion_rate_or_none(timestamp)
        if token_b_price is None:
            return None
        return trading_tokens_to_pool_tokens(
            token_b_price,
            self.ray,
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
        token_b_price = self._conversion_rate_or_none(timestamp)
        if token_b_price is None:
            return None
        return trading_tokens_to_pool_tokens(
            token_b_price,
            self.ray,
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            round_direction,
        )

    def validate(self, timestamp: int | None = None) -> None:
        """Check the curve can price trades at ``timestamp``.

        Raises:
            MissingTimestamp: If timestamp is None
            InvalidCurve: If ray or the projected rate is zero
            CalculationFailure: If the rate cannot be projected to timestamp
        """
        if timestamp is None:
            raise MissingTimestamp("Redemption rate curve requires a timestamp")
        if self.ray == 0:
            raise InvalidCurve("Redemption rate curve has a zero ray")
        token_b_price = self.get_conversion_rate(timestamp)
        if token_b_price is None:
            raise CalculationFailure(f"Cannot project conversion rate to {timestamp}")
        if token_b_price == 0:
            raise InvalidCurve("Redemption rate curve has a zero conversion rate")

    def normalized_value(
        self,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        timestamp: int | None = None,
    ) -> int | None:
        token_b_price = self._conversion_rate_or_none(timestamp)
        if token_b_price is None:
            return None
        return normalized_value_at_price(
            swap_token_a_amount, swap_token_b_amount, token_b_price, self.ray
        )

    def _conversion_rate_or_none(self, timestamp: int | None) -> int | None:
        if timestamp is None:
            return None
        return self.get_conversion_rate(timestamp)

    # --- Packing ---

    def pack(self) -> bytes:
        return pack_u128_fields(self.ray, self.max_ssr, self.ssr, self.rho, self.chi)

    @classmethod
    def unpack(cls, data: bytes) -> RedemptionRateCurve:
        ray, max_ssr, ssr, rho, chi = unpack_u128_fields(data, 5)
        return cls(ray=ray, max_ssr=max_ssr, ssr=ssr, rho=rho, chi=chi)


@checked
def _scale_index(growth: int, chi: int, ray: int) -> int:
    """growth * chi / ray, kept in the uint256 domain."""
    return (U256(growth) * U256(chi) // U256(ray)).value
