"""Grid simulation engine.

Deterministic martingale / DCA ladder simulator: builds the order ladder,
accumulates the basket up to the boundary, fires at most one hedge on
stop-loss and reports per-order and aggregate P&L.
"""

from __future__ import annotations

from dcagrid.engine.accumulator import AccumulationResult, PositionAccumulator
from dcagrid.engine.artifacts import GridArtifacts, build_artifacts, dump_artifacts_json
from dcagrid.engine.config import GridConfig, HedgeConfig
from dcagrid.engine.exit import apply_win_mode, exit_price
from dcagrid.engine.hedge import HedgeEvaluator, HedgeOutcome
from dcagrid.engine.ladder import LadderGenerator, LadderOrder, generate_ladder
from dcagrid.engine.position import GridPosition
from dcagrid.engine.simulator import GridSimulator, SimulationResult, simulate
from dcagrid.engine.summary import GridSummary, compute_summary, null_summary
from dcagrid.engine.types import SAFETY_CAP, Crossing, Direction, OrderKind, normalize_lot

__all__ = [
    "SAFETY_CAP",
    "AccumulationResult",
    "Crossing",
    "Direction",
    "GridArtifacts",
    "GridConfig",
    "GridPosition",
    "GridSimulator",
    "GridSummary",
    "HedgeConfig",
    "HedgeEvaluator",
    "HedgeOutcome",
    "LadderGenerator",
    "LadderOrder",
    "OrderKind",
    "PositionAccumulator",
    "SimulationResult",
    "apply_win_mode",
    "build_artifacts",
    "compute_summary",
    "dump_artifacts_json",
    "exit_price",
    "generate_ladder",
    "normalize_lot",
    "null_summary",
    "simulate",
]
