"""Mathematical utilities for the curve engine.

This package provides fixed-point primitives for rate accrual:
- rpow: ray-scaled exponentiation by squaring
"""

from psm.math.fixed_point import rpow

__all__ = ["rpow"]
