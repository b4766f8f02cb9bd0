"""Numeric constants shared by the curve engine.

Centralizes integer bounds and fixed-point parameters.
"""

# Fixed-point unit representing 1.0 (27 decimals, "ray")
RAY = 10**27

# Integer bounds for the narrow (persisted) and wide (intermediate) domains
U128_MAX = 2**128 - 1
U256_MAX = 2**256 - 1

# Pool tokens minted to the first depositor of a new pool
INITIAL_SWAP_POOL_AMOUNT = 1_000_000_000
