"""Pytest configuration and fixtures."""

import pytest

from psm.curve import ConstantPriceCurve, RedemptionRateCurve
from psm.engine import SwapEngine
from tests.helpers.constants import FIVE_PCT_APY_SSR, SAMPLE_CHI, TWO_RAY
from tests.helpers.factories import make_engine, make_rate_curve


@pytest.fixture
def constant_price_curve() -> ConstantPriceCurve:
    """Two token A per token B."""
    return ConstantPriceCurve(token_b_price=TWO_RAY)


@pytest.fixture
def flat_rate_curve() -> RedemptionRateCurve:
    """Index of 2.0 that does not accrue (ssr = 1.0)."""
    return make_rate_curve(chi=TWO_RAY)


@pytest.fixture
def sample_rate_curve() -> RedemptionRateCurve:
    """Index of 1.0486, not accruing."""
    return make_rate_curve(chi=SAMPLE_CHI)


@pytest.fixture
def accruing_rate_curve() -> RedemptionRateCurve:
    """5% APY curve checkpointed at t=1000 with index 1.0, capped at 5% APY."""
    return make_rate_curve(max_ssr=FIVE_PCT_APY_SSR, ssr=FIVE_PCT_APY_SSR, rho=1_000)


@pytest.fixture
def rate_engine(accruing_rate_curve: RedemptionRateCurve) -> SwapEngine:
    """Engine over the accruing rate curve."""
    return make_engine(accruing_rate_curve)


@pytest.fixture
def constant_price_engine(constant_price_curve: ConstantPriceCurve) -> SwapEngine:
    """Engine over the constant price curve."""
    return make_engine(constant_price_curve)
