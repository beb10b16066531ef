#!/usr/bin/env python3
"""Solve for the boundary distance that hits a target breakeven or P&L.

Usage:
    python scripts/solve_range.py --entry 2000 --target-breakeven 1970
    python scripts/solve_range.py --config grid.json --target-pnl -5000

The solved boundary is re-run once and its summary printed.
"""

from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    from dcagrid.cli import add_grid_arguments

    parser = argparse.ArgumentParser(description="Solve grid boundary for a target")
    add_grid_arguments(parser)
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--target-breakeven", type=float, default=None, help="Target breakeven price"
    )
    target.add_argument("--target-pnl", type=float, default=None, help="Target net P&L")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run solver."""
    args = build_parser().parse_args(argv)

    from dcagrid.cli import ConfigLoadError, config_from_args, format_summary
    from dcagrid.engine import simulate
    from dcagrid.logging_config import setup_logging
    from dcagrid.solver import solve_for_breakeven, solve_for_target_pnl

    setup_logging(level=args.log_level.upper(), json_format=args.json_logs)

    try:
        config = config_from_args(args)
    except (ConfigLoadError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    if args.target_breakeven is not None:
        print(f"Solving for breakeven {args.target_breakeven}...")
        solution = solve_for_breakeven(config, args.target_breakeven)
    else:
        print(f"Solving for net P&L {args.target_pnl}...")
        solution = solve_for_target_pnl(config, args.target_pnl)

    if solution is None:
        print("ERROR: target must be a positive price (breakeven) or a finite amount (P&L)")
        return 1

    print("\n=== SOLUTION ===")
    print(f"  Boundary: {solution.boundary_price:.2f}")
    print(f"  Distance: {solution.distance:.2f}")
    print(f"  Objective: {solution.objective:.2f} (residual {solution.residual:.2f})")
    print(f"  Iterations: {solution.iterations}")
    print(f"  Converged: {'yes' if solution.converged else 'no'}")
    print(f"  Monotonic: {'yes' if solution.monotonic else 'no'}")

    result = simulate(solution.apply(config))
    print("\n=== SUMMARY AT SOLVED BOUNDARY ===")
    print(format_summary(result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
