"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Savings rates and index values
- curve_checks: Value-preservation checks run against any calculator
- factories: Curve and engine factory functions
"""

from tests.helpers.constants import (
    FIVE_PCT_APY_SSR,
    ONE_HUNDRED_PCT_APY_SSR,
    RAY,
    SAMPLE_CHI,
    SECONDS_PER_YEAR,
    TWO_RAY,
)
from tests.helpers.curve_checks import (
    CONVERSION_BASIS_POINTS_GUARANTEE,
    check_curve_value_from_swap,
    check_deposit_token_conversion,
    check_pool_value_from_deposit,
    check_pool_value_from_withdraw,
    check_withdraw_token_conversion,
)
from tests.helpers.factories import make_engine, make_rate_curve

__all__ = [
    # Constants
    "FIVE_PCT_APY_SSR",
    "ONE_HUNDRED_PCT_APY_SSR",
    "RAY",
    "SAMPLE_CHI",
    "SECONDS_PER_YEAR",
    "TWO_RAY",
    # Checks
    "CONVERSION_BASIS_POINTS_GUARANTEE",
    "check_curve_value_from_swap",
    "check_deposit_token_conversion",
    "check_pool_value_from_deposit",
    "check_pool_value_from_withdraw",
    "check_withdraw_token_conversion",
    # Factories
    "make_engine",
    "make_rate_curve",
]
