"""Ray fixed-point exponentiation.

Implements ``rpow``, the exponentiation-by-squaring routine used by savings
rate oracles to compound a per-second rate over an elapsed duration. It
matches the Solidity reference bit for bit:
https://github.com/sparkdotfi/xchain-ssr-oracle/blob/0593279e643285bd4d54e23e37a050e0cad215ce/src/SSROracleBase.sol#L123-L146

All values are integers scaled by ``ray`` (10^27 by default). Intermediate
products live in the uint256 domain; any overflow aborts the whole
computation.
"""

from __future__ import annotations

from psm.constants import RAY
from psm.wide_int import U256, checked

__all__ = ["rpow"]


@checked
def _rpow(x: U256, n: int, ray: U256) -> int:
    if x == 0:
        return ray.value if n == 0 else 0

    half = ray // 2
    # Odd exponents start from x, even ones from 1.0
    z = ray if n % 2 == 0 else x
    n //= 2

    while n > 0:
        # x = round(x^2 / ray), raising on overflow of the product or the rounding add
        x = (x * x + half) // ray
        if n % 2 == 1:
            z = (z * x + half) // ray
        n //= 2

    return z.value


def rpow(x: int, n: int, ray: int = RAY) -> int | None:
    """Compute (x / ray)^n, scaled by ray, rounding to nearest at every step.

    Args:
        x: Base, scaled by ray (e.g. a per-second savings rate)
        n: Integer exponent (e.g. elapsed seconds)
        ray: Fixed-point unit

    Returns:
        x^n scaled by ray, or None if any intermediate step overflows uint256

    Raises:
        ValueError: If x or n is negative, or ray is not positive

    Examples:
        rpow(2 * RAY, 3) == 8 * RAY
        rpow(0, 0) == RAY
        rpow(0, 5) == 0
    """
    if x < 0 or n < 0:
        raise ValueError(f"rpow requires non-negative operands, got x={x}, n={n}")
    if ray <= 0:
        raise ValueError(f"rpow requires a positive ray, got {ray}")
    if x.bit_length() > 256 or ray.bit_length() > 256:
        return None
    return _rpow(U256(x), n, U256(ray))
