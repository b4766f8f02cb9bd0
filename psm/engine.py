"""Swap engine: thin orchestration over a tagged curve.

The engine answers the questions the instruction layer asks of a pool
("if I swap X", "if I deposit X", "what is the pool worth") and applies
rate updates as copy-on-write replacements of the curve record. It never
touches balances or storage; every result is either a full answer or a
failure that the caller must treat as "reject the transaction".
"""

from __future__ import annotations

from typing import Any

import structlog

from psm.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from psm.curve.base import CurveType, SwapCurve
from psm.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from psm.curve.redemption_rate import RedemptionRateCurve
from psm.errors import InvalidCurveType, RateDurationExceeded, SwapError

logger = structlog.get_logger()


class SwapEngine:
    """Dispatches pool questions to the curve selected by its type tag.

    Attributes:
        curve: The tagged curve record (immutable)
        config: Engine configuration
    """

    def __init__(self, curve: SwapCurve, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self.curve = curve
        self.config = config

    def __repr__(self) -> str:
        return f"SwapEngine({self.curve!r})"

    @property
    def calculator(self) -> CurveCalculator:
        return self.curve.calculator

    @property
    def curve_type(self) -> CurveType:
        return self.curve.curve_type

    # --- Pricing ---

    def swap(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> SwapWithoutFeesResult | None:
        """Simulate a swap of source_amount against the pool reserves.

        Returns:
            Amounts swapped, or None if the swap must be rejected
        """
        if not self._within_rate_duration(timestamp):
            return None
        result = self.calculator.swap_without_fees(
            source_amount,
            swap_source_amount,
            swap_destination_amount,
            trade_direction,
            timestamp,
        )
        if result is None:
            self._log_failure(
                "swap_failed",
                source_amount=source_amount,
                direction=trade_direction.value,
                timestamp=timestamp,
            )
        return result

    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        timestamp: int | None = None,
    ) -> int | None:
        """Pool tokens minted for a one-sided deposit."""
        if not self._within_rate_duration(timestamp):
            return None
        pool_tokens = self.calculator.deposit_single_token_type(
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            timestamp,
        )
        if pool_tokens is None:
            self._log_failure(
                "deposit_failed",
                source_amount=source_amount,
                pool_supply=pool_supply,
                direction=trade_direction.value,
            )
        return pool_tokens

    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection = RoundDirection.CEILING,
        timestamp: int | None = None,
    ) -> int | None:
        """Pool tokens to burn to withdraw exactly source_amount of one token.

        Defaults to rounding the burn up, so the pool is never under-charged.
        """
        if not self._within_rate_duration(timestamp):
            return None
        pool_tokens = self.calculator.withdraw_single_token_type_exact_out(
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            round_direction,
            timestamp,
        )
        if pool_tokens is None:
            self._log_failure(
                "withdraw_failed",
                source_amount=source_amount,
                pool_supply=pool_supply,
                direction=trade_direction.value,
            )
        return pool_tokens

    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
        timestamp: int | None = None,
    ) -> TradingTokenResult | None:
        if not self._within_rate_duration(timestamp):
            return None
        result = self.calculator.pool_tokens_to_trading_tokens(
            pool_tokens,
            pool_token_supply,
            swap_token_a_amount,
            swap_token_b_amount,
            round_direction,
            timestamp,
        )
        if result is None:
            self._log_failure(
                "pool_token_conversion_failed",
                pool_tokens=pool_tokens,
                pool_token_supply=pool_token_supply,
            )
        return result

    def normalized_value(
        self,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        timestamp: int | None = None,
    ) -> int | None:
        if not self._within_rate_duration(timestamp):
            return None
        return self.calculator.normalized_value(swap_token_a_amount, swap_token_b_amount, timestamp)

    def conversion_rate(self, timestamp: int) -> int | None:
        """Ray-scaled value of one token B in token A at timestamp.

        Raises:
            InvalidCurveType: If the curve is not rate based
        """
        calculator = self._rate_calculator()
        if not self._within_rate_duration(timestamp):
            return None
        return calculator.get_conversion_rate(timestamp)

    # --- Validation ---

    def validate(self, timestamp: int | None = None) -> None:
        """Raise a SwapError if the curve cannot price trades at timestamp."""
        if not self._within_rate_duration(timestamp):
            raise RateDurationExceeded(
                f"More than {self.config.max_rate_duration}s since the last checkpoint"
            )
        self.calculator.validate(timestamp)

    def validate_supply(self, token_a_amount: int, token_b_amount: int) -> None:
        self.calculator.validate_supply(token_a_amount, token_b_amount)

    def new_pool_supply(self) -> int:
        return self.calculator.new_pool_supply()

    # --- Rate updates ---

    def update_rates(self, ssr: int, rho: int, chi: int, current_timestamp: int) -> SwapEngine:
        """Commit a new rate checkpoint, returning a new engine.

        The current engine and its curve are left untouched.

        Raises:
            InvalidCurveType: If the curve is not rate based
            SwapError: If the new checkpoint violates a rate invariant
        """
        calculator = self._rate_calculator()
        try:
            new_calculator = calculator.set_rates(ssr, rho, chi, current_timestamp)
        except SwapError as err:
            logger.info(
                "rate_update_rejected",
                reason=type(err).__name__,
                ssr=ssr,
                rho=rho,
                chi=chi,
                current_timestamp=current_timestamp,
            )
            raise
        logger.info("rate_update_committed", ssr=ssr, rho=rho, chi=chi, previous_rho=calculator.rho)
        return SwapEngine(SwapCurve.from_calculator(new_calculator), self.config)

    # --- Packing ---

    def pack(self) -> bytes:
        return self.curve.pack()

    @classmethod
    def unpack(cls, data: bytes, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> SwapEngine:
        return cls(SwapCurve.unpack(data), config)

    # --- Helpers ---

    def _rate_calculator(self) -> RedemptionRateCurve:
        calculator = self.calculator
        if not isinstance(calculator, RedemptionRateCurve):
            raise InvalidCurveType(f"{self.curve_type.name} curve has no redemption rate")
        return calculator

    def _within_rate_duration(self, timestamp: int | None) -> bool:
        max_duration = self.config.max_rate_duration
        calculator = self.calculator
        if max_duration is None or timestamp is None:
            return True
        if not isinstance(calculator, RedemptionRateCurve):
            return True
        if timestamp - calculator.rho <= max_duration:
            return True
        self._log_failure(
            "rate_duration_exceeded",
            rho=calculator.rho,
            timestamp=timestamp,
            max_rate_duration=max_duration,
        )
        return False

    def _log_failure(self, event: str, **context: Any) -> None:
        if self.config.log_failures:
            logger.debug(event, curve_type=self.curve_type.name, **context)


def process_curve_update(
    data: bytes,
    ssr: int,
    rho: int,
    chi: int,
    current_timestamp: int,
) -> bytes:
    """Apply a rate update to a packed curve record.

    Args:
        data: Packed SwapCurve bytes (at least SwapCurve.LEN)
        ssr: New savings rate, scaled by ray
        rho: New checkpoint timestamp
        chi: New index at rho, scaled by ray
        current_timestamp: Current unix timestamp, supplied by the caller

    Returns:
        The packed bytes of the updated curve

    Raises:
        InvalidCurveData: If data is malformed
        InvalidCurveType: If the packed curve is not a redemption rate curve
        SwapError: If the new checkpoint violates a rate invariant
    """
    engine = SwapEngine.unpack(data)
    return engine.update_rates(ssr, rho, chi, current_timestamp).pack()
