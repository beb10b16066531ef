#!/usr/bin/env python3
"""Run the grid simulator for one configuration.

Usage:
    python scripts/run_grid.py --entry 2000 --range 50 --step 10 --multiplier 1.4
    python scripts/run_grid.py --config grid.json --hedge --stop-loss -100 --out out/

Outputs (with --out):
    grid_artifacts.json - Config, positions and summary
    sha256.txt - SHA256 digest of artifacts
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    from dcagrid.cli import add_grid_arguments

    parser = argparse.ArgumentParser(description="Run martingale grid simulation")
    add_grid_arguments(parser)
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output directory for artifacts (default: no files written)",
    )
    parser.add_argument(
        "--balance",
        type=float,
        default=None,
        help="Account balance for equity/drawdown stats",
    )
    parser.add_argument(
        "--profit-distance",
        type=float,
        default=None,
        help="Report profit target this far beyond breakeven",
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run simulation."""
    args = build_parser().parse_args(argv)

    from dcagrid.analytics import account_stats, profit_target
    from dcagrid.cli import ConfigLoadError, config_from_args, format_positions, format_summary
    from dcagrid.engine import build_artifacts, dump_artifacts_json, simulate
    from dcagrid.logging_config import setup_logging

    setup_logging(level=args.log_level.upper(), json_format=args.json_logs)
    logger = logging.getLogger("run_grid")

    try:
        config = config_from_args(args)
    except (ConfigLoadError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    print(
        f"Config: {config.direction.value} entry={config.entry_price} "
        f"boundary={config.boundary_price} step={config.step} "
        f"lot={config.initial_lot} x{config.lot_multiplier}"
    )

    result = simulate(config)
    if not result.positions:
        logger.warning("Simulation produced no positions")

    print()
    print(format_positions(result))
    print("\n=== SUMMARY ===")
    print(format_summary(result))

    if args.balance is not None:
        stats = account_stats(result.summary, args.balance)
        print("\n=== ACCOUNT ===")
        print(f"  Equity: {stats.equity:.2f}")
        print(f"  Drawdown: {stats.drawdown_amount:.2f} ({stats.drawdown_pct:.1f}%)")

    if args.profit_distance is not None:
        tgt = profit_target(result.summary, config, args.profit_distance)
        print("\n=== PROFIT TARGET ===")
        print(f"  Target price: {tgt.target_price:.2f}")
        print(f"  Profit: {tgt.profit:.2f}")
        print(f"  Move from boundary: {tgt.move:.2f}")

    if args.out is not None:
        artifacts = build_artifacts(config, result)
        args.out.mkdir(parents=True, exist_ok=True)

        artifacts_path = args.out / "grid_artifacts.json"
        with open(artifacts_path, "wb") as f:
            f.write(dump_artifacts_json(artifacts))
        print(f"\n  Artifacts written to {artifacts_path}")

        sha256_path = args.out / "sha256.txt"
        with open(sha256_path, "w") as f:
            f.write(f"{artifacts.sha256}\n")
        print(f"  SHA256 written to {sha256_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
