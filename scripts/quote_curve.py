#!/usr/bin/env python3
"""Quote a swap against a curve described by a JSON parameters file.

Prints the conversion rate (rate curves), the swap result and the pool's
normalized value before and after the swap.

Usage:
    python scripts/quote_curve.py --curve params.json --amount 1000000 \\
        --direction b_to_a --reserve-a 10000000000 --reserve-b 10000000000 \\
        [--timestamp 1700000000] [--max-duration 31536000] [--verbose]

Exit codes:
    0 - Quote computed
    1 - Invalid curve or the swap was rejected
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import structlog

from psm.config import EngineConfig
from psm.curve import CurveType, TradeDirection, parse_curve
from psm.engine import SwapEngine
from psm.errors import SwapError

logger = structlog.get_logger()


def main() -> int:
    parser = argparse.ArgumentParser(description="Quote a swap against a PSM curve")
    parser.add_argument("--curve", type=Path, required=True, help="Curve parameters JSON file")
    parser.add_argument("--amount", type=int, required=True, help="Source amount to swap")
    parser.add_argument(
        "--direction",
        choices=[d.value for d in TradeDirection],
        default=TradeDirection.A_TO_B.value,
        help="Trade direction",
    )
    parser.add_argument("--reserve-a", type=int, required=True, help="Pool reserve of token A")
    parser.add_argument("--reserve-b", type=int, required=True, help="Pool reserve of token B")
    parser.add_argument(
        "--timestamp",
        type=int,
        default=None,
        help="Unix timestamp to price at (default: now)",
    )
    parser.add_argument(
        "--max-duration",
        type=int,
        default=None,
        help="Refuse to compound the rate over more seconds than this",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    if not args.curve.exists():
        logger.error("curve_file_not_found", path=str(args.curve))
        return 1

    timestamp = args.timestamp if args.timestamp is not None else int(time.time())
    direction = TradeDirection(args.direction)

    try:
        with open(args.curve) as f:
            curve = parse_curve(json.load(f))
        engine = SwapEngine(curve, EngineConfig(max_rate_duration=args.max_duration))
        engine.validate(timestamp)
    except SwapError as err:
        logger.error("curve_invalid", error=str(err))
        return 1

    if direction is TradeDirection.A_TO_B:
        source_reserve, destination_reserve = args.reserve_a, args.reserve_b
    else:
        source_reserve, destination_reserve = args.reserve_b, args.reserve_a

    result = engine.swap(args.amount, source_reserve, destination_reserve, direction, timestamp)
    if result is None:
        logger.error("swap_rejected", amount=args.amount, direction=direction.value)
        return 1

    if direction is TradeDirection.A_TO_B:
        new_a = args.reserve_a + result.source_amount_swapped
        new_b = args.reserve_b - result.destination_amount_swapped
    else:
        new_a = args.reserve_a - result.destination_amount_swapped
        new_b = args.reserve_b + result.source_amount_swapped

    print("=" * 60)
    print(f"Curve type:        {engine.curve_type.name}")
    if engine.curve_type is CurveType.REDEMPTION_RATE:
        print(f"Conversion rate:   {engine.conversion_rate(timestamp)}")
    print(f"Source used:       {result.source_amount_swapped}")
    print(f"Destination paid:  {result.destination_amount_swapped}")
    value_before = engine.normalized_value(args.reserve_a, args.reserve_b, timestamp)
    print(f"Value before:      {value_before}")
    print(f"Value after:       {engine.normalized_value(new_a, new_b, timestamp)}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
