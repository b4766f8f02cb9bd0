"""Curve engine error classes.

Arithmetic failures inside the curve math surface as ``None`` results (see
psm.wide_int). The errors below are raised by the operations that return a
result-or-error: validation, rate updates and (un)packing of curve records.
"""


class SwapError(Exception):
    """Base error for curve engine operations."""

    pass


class InvalidCurve(SwapError):
    """Curve's effective price or conversion rate is zero."""

    pass


class EmptySupply(SwapError):
    """Pool initialized with zero of the reference token (token A)."""

    pass


class MissingTimestamp(SwapError):
    """Rate-based curve used without a current timestamp."""

    pass


class CalculationFailure(SwapError):
    """Arithmetic overflow or division by zero while computing a result."""

    pass


class RateDurationExceeded(SwapError):
    """Elapsed time since the last checkpoint exceeds the configured bound."""

    pass


# --- Rate update invariants ---


class InvalidRho(SwapError):
    """New checkpoint timestamp is invalid."""

    pass


class RhoInFuture(InvalidRho):
    """New rho is later than the current timestamp."""

    pass


class RhoDecreased(InvalidRho):
    """New rho is earlier than the last committed rho."""

    pass


class InvalidSsr(SwapError):
    """New savings rate is out of band."""

    pass


class SsrBelowRay(InvalidSsr):
    """New ssr is below ray, which would shrink the index."""

    pass


class SsrAboveMax(InvalidSsr):
    """New ssr exceeds the configured max_ssr."""

    pass


class InvalidChi(SwapError):
    """New accumulated index is invalid."""

    pass


class ChiDecreased(InvalidChi):
    """New chi is below the last committed chi."""

    pass


class ChiGrowthExceeded(InvalidChi):
    """New chi exceeds the growth max_ssr could produce since the last rho."""

    pass


# --- Curve records ---


class InvalidCurveData(SwapError):
    """Packed curve bytes are malformed or a field is out of range."""

    pass


class InvalidCurveType(SwapError):
    """Unknown curve discriminant, or operation unsupported by the curve type."""

    pass
