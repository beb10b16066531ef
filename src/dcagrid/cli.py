"""Shared command-line plumbing for the grid scripts.

Builds a GridConfig from an optional JSON config file plus per-field flags
(flags win), and renders results as plain-text tables.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from dcagrid.engine.config import GridConfig
from dcagrid.engine.types import Direction

if TYPE_CHECKING:
    from dcagrid.engine.simulator import SimulationResult

# argparse dest -> GridConfig field
_GRID_FIELDS: dict[str, str] = {
    "entry": "entry_price",
    "boundary": "boundary_price",
    "step": "step",
    "initial_lot": "initial_lot",
    "multiplier": "lot_multiplier",
    "direction": "direction",
    "contract_size": "contract_size",
    "target_profit": "target_profit_distance",
}

# argparse dest -> HedgeConfig field
_HEDGE_FIELDS: dict[str, str] = {
    "stop_loss": "stop_loss_amount",
    "hedge_lot_multiplier": "lot_multiplier",
    "stop_loss_expansion": "stop_loss_expansion_multiplier",
}


class ConfigLoadError(Exception):
    """Raised when a config file cannot be read or parsed."""


def add_grid_arguments(parser: argparse.ArgumentParser) -> None:
    """Register GridConfig flags on parser. Unset flags default to None."""
    parser.add_argument("--config", type=Path, default=None, help="JSON GridConfig file")
    parser.add_argument("--entry", type=float, default=None, help="Entry price (default: 2000)")
    boundary = parser.add_mutually_exclusive_group()
    boundary.add_argument("--boundary", type=float, default=None, help="Boundary price")
    boundary.add_argument(
        "--range",
        type=float,
        default=None,
        dest="distance",
        help="Boundary distance from entry on the adverse side",
    )
    parser.add_argument("--step", type=float, default=None, help="Rung step (default: 10)")
    parser.add_argument("--initial-lot", type=float, default=None, help="Entry lot (default: 0.01)")
    parser.add_argument(
        "--multiplier", type=float, default=None, help="Lot multiplier (default: 1.4)"
    )
    parser.add_argument(
        "--direction",
        type=str.upper,
        choices=[d.value for d in Direction],
        default=None,
        help="LONG or SHORT (default: LONG)",
    )
    parser.add_argument(
        "--contract-size", type=float, default=None, help="Units per lot (default: 100)"
    )
    parser.add_argument(
        "--dynamic",
        action="store_true",
        default=None,
        help="Interleave DYNAMIC rungs at 1.5-step offsets",
    )
    parser.add_argument("--hedge", action="store_true", default=None, help="Enable hedge stop-loss")
    parser.add_argument(
        "--stop-loss", type=float, default=None, help="Hedge stop-loss amount (< 0)"
    )
    parser.add_argument(
        "--hedge-lot-multiplier",
        type=float,
        default=None,
        help="Hedge lot as multiple of basket lot (default: 2)",
    )
    parser.add_argument(
        "--stop-loss-expansion",
        type=float,
        default=None,
        help="Stop-loss expansion multiplier (accepted, unused)",
    )
    parser.add_argument("--win-mode", action="store_true", default=None, help="Mark at profit exit")
    parser.add_argument(
        "--target-profit",
        type=float,
        default=None,
        help="Win-mode exit distance beyond breakeven (default: 20)",
    )


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON config file into a dict.

    Raises:
        ConfigLoadError: If the file is missing, unreadable or not a JSON object.
    """
    try:
        data = orjson.loads(path.read_bytes())
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config file {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config file {path} must contain a JSON object")
    return data


def config_from_args(args: argparse.Namespace) -> GridConfig:
    """Build a validated GridConfig from parsed arguments.

    Raises:
        ConfigLoadError: If --config cannot be loaded.
        pydantic.ValidationError: If the merged values are invalid.
    """
    data: dict[str, Any] = read_config_file(args.config) if args.config else {}
    hedge: dict[str, Any] = dict(data.get("hedge") or {})

    for dest, name in _GRID_FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            data[name] = value
    for dest, name in _HEDGE_FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            hedge[name] = value

    if args.dynamic:
        data["use_dynamic_ladder"] = True
    if args.win_mode:
        data["win_mode"] = True
    if args.hedge:
        hedge["enabled"] = True
    if hedge:
        data["hedge"] = hedge

    config = GridConfig.model_validate(data)
    if args.distance is not None:
        config = config.with_distance(args.distance)
    return config


def format_positions(result: SimulationResult) -> str:
    """Render positions as a fixed-width table."""
    header = (
        f"{'TYPE':<8} {'LEVEL':<8} {'PRICE':>12} {'LOT':>8} "
        f"{'INDIV PNL':>12} {'CUMUL PNL':>12} {'TOTAL LOT':>10} {'AVG PRICE':>12}"
    )
    lines = [header, "-" * len(header)]
    for p in result.positions:
        lines.append(
            f"{p.kind.value:<8} {p.label:<8} {p.price:>12.2f} {p.lot:>8.2f} "
            f"{p.individual_pnl:>12.2f} {p.cumulative_pnl:>12.2f} "
            f"{p.total_lot_after:>10.2f} {p.avg_price_after:>12.2f}"
        )
    return "\n".join(lines)


def format_summary(result: SimulationResult) -> str:
    """Render the summary as aligned key/value lines."""
    s = result.summary
    trigger = f"{s.hedge_trigger_price:.2f}" if s.hedge_trigger_price is not None else "-"
    rows = [
        ("Filled orders", f"{s.filled_order_count}"),
        ("Gross average", f"{s.gross_average_price:.2f}"),
        ("Net average", f"{s.net_average_price:.2f}"),
        ("Total lot", f"{s.total_lot:.2f}"),
        ("Hedge lot", f"{s.hedge_lot:.2f}"),
        ("Net lot", f"{s.net_lot:.2f}"),
        ("Main PnL", f"{s.main_pnl:.2f}"),
        ("Hedge PnL", f"{s.hedge_pnl:.2f}"),
        ("Net PnL", f"{s.net_pnl:.2f}"),
        ("Range covered", f"{s.range_covered:.2f}"),
        ("Breakeven distance", f"{s.breakeven_distance:.2f}"),
        ("Recovery gap", f"{s.recovery_gap:.2f}"),
        ("Hedged", "yes" if s.is_hedged else "no"),
        ("Hedge trigger", trigger),
    ]
    return "\n".join(f"  {label}: {value}" for label, value in rows)
